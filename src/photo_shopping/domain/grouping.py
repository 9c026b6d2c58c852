"""Rebuild shopping list lines from OCR word boxes.

Words arrive in the detector's scan order (top to bottom, left to right).
A word continues the current line while its x does not move backwards
relative to the previous word and its y stays within NOISE_FACTOR of the
line's baseline. The baseline is fixed once per line and never follows the
individual words, so a slowly drifting line is eventually broken.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from ..errors import EmptyTextFailure
from ..logging import get_logger
from .models import WordPositionEntry
from .normalize import format_query

LOG = get_logger("grouping")

NOISE_FACTOR = 5
# 0 means "baseline not fixed yet for the line being built".
_UNSET = 0

Formatter = Callable[[str], str]


def is_same_line(x_current: int, y_current: int, x_ref: int, y_ref: int) -> bool:
    """Return True when (x_current, y_current) continues the line.

    x_ref is the previous word's x; y_ref is the line baseline.
    """
    return x_current >= x_ref and y_ref - NOISE_FACTOR <= y_current <= y_ref + NOISE_FACTOR


def group_lines(
    entries: Sequence[WordPositionEntry],
    formatter: Formatter = format_query,
) -> List[str]:
    """Group words into lines and return one formatted query per line.

    The caller must have removed the detector's whole-text summary entry.
    Lines that format to an empty string are dropped; if nothing is left,
    EmptyTextFailure is raised.
    """
    if not entries:
        raise EmptyTextFailure()

    x_ref = entries[0].lower_x_boundary
    y_ref = _UNSET
    words: List[str] = []
    raw_lines: List[str] = []

    for word in entries:
        if y_ref == _UNSET:
            y_ref = word.lower_y_boundary
        x_cur = word.lower_x_boundary
        y_cur = word.lower_y_boundary

        if is_same_line(x_cur, y_cur, x_ref, y_ref):
            words.append(word.text)
        else:
            raw_lines.append(" ".join(words))
            y_ref = _UNSET
            words = [word.text]
        x_ref = x_cur
    raw_lines.append(" ".join(words))

    queries: List[str] = []
    for raw in raw_lines:
        query = formatter(raw)
        if not query:
            LOG.debug(f"Dropping line without searchable text: {raw!r}")
            continue
        queries.append(query)

    LOG.debug(f"Grouped {len(entries)} word(s) into {len(raw_lines)} line(s), {len(queries)} kept")
    if not queries:
        raise EmptyTextFailure()
    return queries


class LineGrouper:
    """Stateless wrapper around group_lines with an injected formatter."""

    def __init__(self, formatter: Formatter = format_query) -> None:
        self.formatter = formatter

    def group(self, entries: Sequence[WordPositionEntry]) -> List[str]:
        return group_lines(entries, formatter=self.formatter)
