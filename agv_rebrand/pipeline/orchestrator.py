from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Callable

from PIL import Image

from agv_rebrand.canvas.compositor import render_rebranded_image
from agv_rebrand.canvas.scanner import detect_candidates
from agv_rebrand.ocr.recognizer import TextRecognizer, split_text_lines
from agv_rebrand.storage.local import save_generated_image
from agv_rebrand.upstream.agv_client import SourceImageFetcher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineRunSummary:
    filename: str
    ocr_text: str
    candidate_count: int
    thumbnails_placed: int
    lines_dropped: int
    logo_placed: bool


def run_rebrand_pipeline(
    dni: str,
    *,
    fetcher: SourceImageFetcher,
    recognizer: TextRecognizer,
    on_progress: Callable[[str, int, str | None], None] | None = None,
) -> PipelineRunSummary:
    def _emit(stage: str, progress: int, detail: str | None = None) -> None:
        logger.info("[%s] %s %d%% %s", dni, stage, progress, detail or "")
        if on_progress is not None:
            on_progress(stage, progress, detail)

    # 1) Source image from the remote agv API.
    _emit("fetch", 5, "calling agv API")
    source_bytes = fetcher.fetch_source_image(dni)

    # 2) OCR on the full image; may take a while and may come back empty.
    _emit("ocr", 20, "running OCR")
    ocr_text = recognizer.recognize(source_bytes)
    text_lines = split_text_lines(ocr_text)

    # 3) Candidate photo cells.
    _emit("scan", 60, f"{len(text_lines)} text line(s)")
    with Image.open(io.BytesIO(source_bytes)) as img:
        source = img.convert("RGB")
    candidates = detect_candidates(source)

    # 4) Rebranded composite.
    _emit("render", 75, f"{len(candidates)} candidate(s)")
    result = render_rebranded_image(source_bytes, candidates, text_lines, dni)

    # 5) Persist under the public dir.
    _emit("persist", 95, None)
    filename = save_generated_image(result.png_bytes, dni, ext="png")
    _emit("completed", 100, filename)

    return PipelineRunSummary(
        filename=filename,
        ocr_text=ocr_text,
        candidate_count=len(candidates),
        thumbnails_placed=result.thumbnails_placed,
        lines_dropped=result.lines_dropped,
        logo_placed=result.logo.placed,
    )
