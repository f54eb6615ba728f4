from __future__ import annotations

import io
import logging
import re
from functools import lru_cache
from typing import Protocol

from PIL import Image

from agv_rebrand.config import settings

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")


class TextRecognizer(Protocol):
    def recognize(self, image_bytes: bytes) -> str:
        """Return recognized text, or an empty string when OCR fails."""


class NullTextRecognizer:
    """Used when no OCR engine is installed."""

    @property
    def available(self) -> bool:
        return False

    def recognize(self, image_bytes: bytes) -> str:
        _ = image_bytes
        return ""


class TesseractTextRecognizer:
    def __init__(
        self,
        languages: str = "eng+spa",
        timeout_seconds: float = 60.0,
        tesseract_cmd: str | None = None,
    ) -> None:
        import pytesseract  # noqa: PLC0415 - optional system binary behind it

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self._pytesseract = pytesseract
        self._languages = languages
        self._timeout_seconds = timeout_seconds

    @property
    def available(self) -> bool:
        try:
            self._pytesseract.get_tesseract_version()
        except Exception:  # noqa: BLE001 - binary missing or broken
            return False
        return True

    def recognize(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                rgb = img.convert("RGB")
            return self._pytesseract.image_to_string(
                rgb,
                lang=self._languages,
                timeout=self._timeout_seconds,
            )
        except Exception as exc:  # noqa: BLE001 - OCR is best-effort
            logger.warning("OCR failed, continuing without text: %s", exc)
            return ""


def split_text_lines(text: str) -> list[str]:
    return [line.strip() for line in _LINE_SPLIT.split(text or "") if line.strip()]


@lru_cache(maxsize=1)
def create_default_recognizer() -> TextRecognizer:
    provider = settings.ocr_provider.lower().strip()

    if provider == "null":
        return NullTextRecognizer()

    try:
        recognizer = TesseractTextRecognizer(
            languages=settings.ocr_languages,
            timeout_seconds=settings.ocr_timeout_seconds,
            tesseract_cmd=settings.tesseract_cmd,
        )
        if not recognizer.available:
            raise RuntimeError("tesseract binary not found")
        return recognizer
    except Exception as exc:  # noqa: BLE001 - engine load failure
        if provider == "tesseract":
            raise
        logger.warning("tesseract unavailable, OCR disabled: %s", exc)

    return NullTextRecognizer()
