"""Photo → shopping queries pipeline, optionally followed by result lookups."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..domain.grouping import LineGrouper
from ..domain.models import SearchOptions
from ..errors import EmptyTextFailure
from ..logging import get_logger
from .detect import TextDetector

LOG = get_logger("orchestrator-extract")


class ShoppingListExtractor:
    """Run text detection on a photo and rebuild the shopping list lines.

    1) The detector scans the image and returns word boxes.
    2) The leading whole-text summary entry is dropped.
    3) The remaining words are grouped into one query per line.
    """

    def __init__(self, detector: TextDetector, grouper: Optional[LineGrouper] = None) -> None:
        self.detector = detector
        self.grouper = grouper or LineGrouper()

    def extract_shopping_list(self, image_bytes: bytes) -> List[str]:
        detected = self.detector.detect(image_bytes)
        if not detected:
            LOG.warning("Detector returned no text")
            raise EmptyTextFailure()
        words = detected[1:]
        LOG.debug(f"Discarded summary entry {detected[0].text!r}; {len(words)} word(s) left")
        queries = self.grouper.group(words)
        LOG.info(f"Extracted {len(queries)} shopping quer{'y' if len(queries) == 1 else 'ies'}")
        return queries

    def search_all(self, queries: Sequence[str], client, options: Optional[SearchOptions] = None) -> Dict[str, str]:
        """Fetch one results page per query, preserving query order.

        `client` needs a `fetch_results_page(query, options)` method. The
        first failure aborts the whole run.
        """
        opts = options or SearchOptions()
        pages: Dict[str, str] = {}
        for query in queries:
            if query in pages:
                continue
            pages[query] = client.fetch_results_page(query, opts)
        return pages
