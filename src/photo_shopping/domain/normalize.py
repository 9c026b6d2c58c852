import unicodedata

from ..logging import get_logger

_LOG = get_logger("normalize")

# Kept only between two letters/digits ("T-Shirt", "M&M", "0.5L", "kid's").
_JOINERS = "'&-."


def _keep(text: str, i: int) -> bool:
    ch = text[i]
    if ch.isalnum():
        return True
    if ch in _JOINERS and 0 < i < len(text) - 1:
        return text[i - 1].isalnum() and text[i + 1].isalnum()
    return False


def format_query(raw: str) -> str:
    """Normalize one reconstructed line into a search query.

    - NFKC-normalizes the text.
    - Replaces anything that is not a letter or digit by a space, except
      in-word joiners (apostrophe, ampersand, hyphen, dot).
    - Collapses whitespace and strips the result. Case is preserved.

    Tokens made only of punctuation or control characters disappear, so a
    line like "^+- \\n" formats to "".
    """
    if not raw:
        return ""
    text = unicodedata.normalize("NFKC", str(raw))
    chars = [ch if _keep(text, i) else " " for i, ch in enumerate(text)]
    query = " ".join("".join(chars).split())
    if query != raw.strip():
        _LOG.debug(f"Normalized query: {raw!r} -> {query!r}")
    return query
