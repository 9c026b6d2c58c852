import os
from typing import Dict, Optional, Tuple

from dotenv import dotenv_values

from .domain.models import SearchOptions
from .logging import get_logger

log = get_logger("config")

DEFAULT_SEARCH_URL = "https://www.google.com/search"
DEFAULT_LANGUAGE = "en"
DEFAULT_MAX_RESULTS = 50
DEFAULT_TESSERACT_LANG = "eng"


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir.

    This makes running tools from subdirectories (e.g., `src/`) still find
    the repository-level `.env`.
    """
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Return the key/value pairs of the nearest .env; never mutates os.environ."""
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return {}
    try:
        raw = dotenv_values(path, encoding="utf-8")
    except OSError as e:
        log.warning(f"Failed reading .env: {e}")
        return {}
    env = {k: v.strip() for k, v in raw.items() if v is not None}
    log.debug(f"Loaded {len(env)} key(s) from .env at {path}")
    return env


def _lookup(dotenv_dir: str, key: str) -> Optional[str]:
    v = os.environ.get(key)
    if v:
        return v.strip()
    v = _read_dotenv(dotenv_dir).get(key)
    return v or None


def load_search_url(dotenv_dir: str, fallback: str = DEFAULT_SEARCH_URL) -> str:
    return (_lookup(dotenv_dir, "SHOPPING_SEARCH_URL") or fallback).strip()


def load_search_options(dotenv_dir: str) -> SearchOptions:
    """Return SearchOptions from SHOPPING_LANGUAGE / SHOPPING_MAX_RESULTS.

    Invalid or non-positive result counts fall back to the default.
    """
    language = _lookup(dotenv_dir, "SHOPPING_LANGUAGE") or DEFAULT_LANGUAGE
    raw_max = _lookup(dotenv_dir, "SHOPPING_MAX_RESULTS")
    max_results = DEFAULT_MAX_RESULTS
    if raw_max:
        try:
            max_results = int(raw_max)
        except ValueError:
            log.warning(f"Ignoring invalid SHOPPING_MAX_RESULTS={raw_max!r}; using {DEFAULT_MAX_RESULTS}")
        else:
            if max_results < 1:
                log.warning(f"SHOPPING_MAX_RESULTS must be positive; using {DEFAULT_MAX_RESULTS}")
                max_results = DEFAULT_MAX_RESULTS
    return SearchOptions(language=language, max_results=max_results)


def load_tesseract(dotenv_dir: str) -> Tuple[Optional[str], str]:
    """Return (tesseract_cmd, tesseract_lang); cmd is None to use PATH."""
    cmd = _lookup(dotenv_dir, "TESSERACT_CMD")
    lang = _lookup(dotenv_dir, "TESSERACT_LANG") or DEFAULT_TESSERACT_LANG
    return cmd, lang
