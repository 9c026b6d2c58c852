"""Text detection adapters turning image bytes into word boxes."""

from __future__ import annotations

import io
from typing import Any, Dict, List, Optional, Protocol

import pytesseract
from PIL import Image, UnidentifiedImageError
from pytesseract import Output

from ..domain.models import WordPositionEntry
from ..errors import PhotoDetectionFailure
from ..logging import get_logger

LOG = get_logger("orchestrator-detect")


class TextDetector(Protocol):
    """Single-method OCR collaborator.

    A non-empty result starts with a summary entry holding the whole
    detected text; callers discard it before grouping.
    """

    def detect(self, image_bytes: bytes) -> List[WordPositionEntry]:
        ...


def _words_from_tesseract(data: Dict[str, List[Any]]) -> List[WordPositionEntry]:
    words: List[WordPositionEntry] = []
    for i, raw_text in enumerate(data.get("text", [])):
        text = str(raw_text or "").strip()
        if not text:
            continue
        try:
            conf = float(data["conf"][i])
        except (KeyError, IndexError, TypeError, ValueError):
            conf = -1.0
        # Tesseract reports -1 for block/paragraph/line rows.
        if conf < 0:
            continue
        left = int(data["left"][i])
        bottom = int(data["top"][i]) + int(data["height"][i])
        words.append(WordPositionEntry.create(text, left, bottom))
    return words


class TesseractTextDetector:
    """TextDetector backed by a local Tesseract install via pytesseract."""

    def __init__(
        self,
        *,
        lang: str = "eng",
        tesseract_cmd: Optional[str] = None,
        config: str = "--oem 1 --psm 3",
        timeout: int = 60,
    ) -> None:
        self.lang = lang
        self.config = config
        self.timeout = int(timeout)
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
            LOG.debug(f"Using tesseract binary: {tesseract_cmd}")

    def _open_image(self, image_bytes: bytes) -> Image.Image:
        if not image_bytes:
            raise PhotoDetectionFailure("byte array is empty")
        try:
            img = Image.open(io.BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            LOG.error(f"Unreadable image ({len(image_bytes)} bytes): {exc}")
            raise PhotoDetectionFailure(f"Unable to read image: {exc}") from exc
        return img.convert("RGB")

    def detect(self, image_bytes: bytes) -> List[WordPositionEntry]:
        img = self._open_image(image_bytes)
        LOG.info(f"Running Tesseract on {img.width}x{img.height} image (lang={self.lang})")
        try:
            data = pytesseract.image_to_data(
                img,
                lang=self.lang,
                config=self.config,
                output_type=Output.DICT,
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as exc:
            LOG.error(f"Tesseract binary not found: {exc}")
            raise PhotoDetectionFailure(f"Text detection unavailable, tesseract not found: {exc}") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            LOG.error(f"Tesseract failed: {exc}")
            raise PhotoDetectionFailure(f"Text detection failed: {exc}") from exc

        words = _words_from_tesseract(data)
        LOG.info(f"Detected {len(words)} word(s)")
        if not words:
            return []
        summary = WordPositionEntry.create(
            " ".join(w.text for w in words),
            words[0].lower_x_boundary,
            words[0].lower_y_boundary,
        )
        return [summary] + words
