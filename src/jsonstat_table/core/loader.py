from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from jsonstat_table.config import JSONSTAT_HTTP_TIMEOUT
from jsonstat_table.core.catalog import DimensionCatalog

logger = logging.getLogger(__name__)

Source = Union[str, Path, Mapping[str, Any]]


class LoaderError(Exception):
    """Raised when a JSON-stat source cannot be read or does not hold a dataset."""


def _build_retry_session() -> requests.Session:
    """
    Build a requests Session with conservative retries.
    Statistics office APIs can be slow or transiently flaky.
    """
    session = requests.Session()

    retry = Retry(
        total=5,
        connect=5,
        read=5,
        status=5,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_retry_session()
    return _SESSION


def _fetch_json(url: str, timeout_seconds: int) -> Any:
    try:
        resp = _get_session().get(url, timeout=timeout_seconds, headers={"Accept": "application/json"})
    except requests.RequestException as exc:
        raise LoaderError(f"HTTP error while fetching {url}: {exc}") from exc

    if resp.status_code != 200:
        preview = (resp.text or "")[:200]
        raise LoaderError(f"Fetching {url} returned status={resp.status_code}. Preview: {preview}")

    try:
        return resp.json()
    except ValueError as exc:
        preview = (resp.text or "")[:200]
        raise LoaderError(f"Non-JSON response from {url}. Preview: {preview}") from exc


def _is_dataset(obj: Any) -> bool:
    return isinstance(obj, Mapping) and "value" in obj and "dimension" in obj


def extract_dataset(payload: Any) -> Dict[str, Any]:
    """
    Return the dataset held by a parsed JSON-stat document.

    Accepts a dataset itself (class 'dataset' or no class), a JSON-stat 1.x
    bundle ({"dataset": {...}}) or any object with exactly one top-level
    dataset member. Collections with several datasets are rejected, pick one
    before loading.
    """
    if _is_dataset(payload):
        return dict(payload)

    if not isinstance(payload, Mapping):
        raise LoaderError(f"Unexpected JSON-stat document type: {type(payload).__name__}")

    candidates = [v for v in payload.values() if _is_dataset(v)]
    if len(candidates) == 1:
        logger.info("Unwrapped JSON-stat bundle with member keys %s", list(payload.keys()))
        return dict(candidates[0])
    if not candidates:
        raise LoaderError(f"No JSON-stat dataset found. Top-level keys: {list(payload.keys())}")
    raise LoaderError(f"JSON-stat document holds {len(candidates)} datasets; expected exactly one.")


def load_jsonstat(source: Source, timeout_seconds: Optional[int] = None) -> Dict[str, Any]:
    """
    Load a JSON-stat dataset as a dict.

    source may be:
      - an already parsed mapping
      - an http(s) URL (fetched with retries)
      - a path to a JSON file
      - a JSON document as a string
    """
    if isinstance(source, Mapping):
        return extract_dataset(source)

    timeout = int(timeout_seconds or JSONSTAT_HTTP_TIMEOUT)
    text = str(source).lstrip("\ufeff").strip()

    if text.startswith(("http://", "https://")):
        logger.info("Fetching JSON-stat from %s", text)
        return extract_dataset(_fetch_json(text, timeout))

    if text.startswith(("{", "[")):
        try:
            return extract_dataset(json.loads(text))
        except json.JSONDecodeError as exc:
            raise LoaderError(f"Invalid JSON-stat text: {exc}") from exc

    path = Path(text)
    if not path.exists():
        raise LoaderError(f"JSON-stat file not found: {path}")

    logger.info("Loading JSON-stat file: %s", path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as exc:
        raise LoaderError(f"Could not read JSON-stat file {path}: {exc}") from exc
    return extract_dataset(payload)


def load_catalog(source: Source, timeout_seconds: Optional[int] = None) -> DimensionCatalog:
    return DimensionCatalog(load_jsonstat(source, timeout_seconds=timeout_seconds))


def timed_load(source: Source, timeout_seconds: Optional[int] = None) -> Tuple[DimensionCatalog, float]:
    """
    Convenience helper for UI timing logs.
    """
    t0 = time.perf_counter()
    catalog = load_catalog(source, timeout_seconds=timeout_seconds)
    return catalog, (time.perf_counter() - t0)
