from typing import List, Optional

import pytest
import requests

from photo_shopping.domain.models import WordPositionEntry
from photo_shopping.errors import PhotoDetectionFailure


class FakeTextDetector:
    """Stands in for the OCR service: returns preset words or raises a preset error."""

    def __init__(self) -> None:
        self.detected: List[WordPositionEntry] = [WordPositionEntry.create("Bag", 10, 13)]
        self.error: Optional[PhotoDetectionFailure] = None
        self.calls = 0

    def set_words(self, words: List[WordPositionEntry]) -> None:
        # The service returns the whole text as its first entry, followed by single words.
        self.detected = [WordPositionEntry.create("Will be ignored", 10, 13)] + list(words)

    def set_return_value(self, detected: List[WordPositionEntry]) -> None:
        self.detected = list(detected)

    def set_exception(self, error: PhotoDetectionFailure) -> None:
        self.error = error

    def detect(self, image_bytes: bytes) -> List[WordPositionEntry]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.detected


class FakeSearchClient:
    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.fail_on = fail_on
        self.requests = []

    def fetch_results_page(self, query, options):
        self.requests.append((query, options))
        if query == self.fail_on:
            raise requests.ConnectionError(f"offline: {query}")
        return f"<html><body>{query} ({options.language}, {options.max_results})</body></html>"


@pytest.fixture
def fake_detector() -> FakeTextDetector:
    return FakeTextDetector()


@pytest.fixture
def fake_search() -> FakeSearchClient:
    return FakeSearchClient()
