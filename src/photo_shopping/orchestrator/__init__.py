"""High-level orchestration helpers for the photo shopping pipeline."""

from .detect import TesseractTextDetector, TextDetector
from .extract import ShoppingListExtractor

__all__ = [
    "TesseractTextDetector",
    "TextDetector",
    "ShoppingListExtractor",
]
