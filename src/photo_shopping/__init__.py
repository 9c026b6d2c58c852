"""
Photo Shopping – turn a photographed shopping list into search queries.

The package is split into small layers:

- domain: word boxes, line grouping and query normalization (pure code)
- orchestrator: OCR adapter and the extraction pipeline
- search: shopping results page client
- cli / frontend: command line and HTTP entry points
"""

__all__ = [
    "config",
    "errors",
    "logging",
    "paths",
]
