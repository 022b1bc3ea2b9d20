from __future__ import annotations

from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.render import render_tsv


def test_integer_cube(integer_catalog) -> None:
    tsv = render_tsv(integer_catalog)
    lines = tsv.split("\n")
    assert tsv.endswith("\n")
    assert lines[0] == "Integer cube"
    assert lines[1] == ""
    assert lines[2] == "\t".join(
        ["Dim A", "Dim B", "C one", "C one", "C two", "C two", "C three", "C three", "C four", "C four"]
    )
    assert lines[3] == "\t".join(["Dim A", "Dim B"] + ["d1", "d2"] * 4)
    assert lines[4] == "\t".join(["a1", "b1"] + [str(i) for i in range(1, 9)])
    assert lines[5] == "\t".join(["a1", "b2"] + [str(i) for i in range(9, 17)])
    assert lines[-2] == "\t".join(["a3", "b2"] + [str(i) for i in range(41, 49)])
    assert len(lines) == 2 + 2 + 6 + 1


def test_labels_only_at_group_start_when_not_repeating(integer_catalog) -> None:
    lines = render_tsv(integer_catalog, repeat_labels=False).split("\n")
    assert lines[4].startswith("a1\tb1\t1")
    assert lines[5].startswith("\tb2\t9")


def test_separators(integer) -> None:
    integer["value"][0] = "semi;colon"
    integer["label"] = None
    tsv = render_tsv(DimensionCatalog(integer), separator_col=";", separator_row="\r\n", num_row_dim=3)
    lines = tsv.split("\r\n")
    assert lines[0] == "Dim A;Dim B;Dim C;d1;d2"
    assert lines[1] == "a1;b1;C one;semi colon;2"
    assert tsv.endswith("\r\n")


def test_null_label(oecd) -> None:
    tsv = render_tsv(DimensionCatalog(oecd), exclude_one_dim=True, null_label="..")
    last_row = tsv.rstrip("\n").split("\n")[-1]
    assert last_row == "total\t7.9\t7.9\t.."


def test_explicit_caption_markup_is_stripped(integer_catalog) -> None:
    tsv = render_tsv(integer_catalog, caption="<b>Integer</b> cube")
    assert tsv.split("\n")[0] == "Integer cube"


def test_dataset_caption_is_kept_as_is(integer) -> None:
    integer["label"] = "<b>Integer</b> cube"
    tsv = render_tsv(DimensionCatalog(integer))
    assert tsv.split("\n")[0] == "<b>Integer</b> cube"
