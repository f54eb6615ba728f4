from __future__ import annotations

import math
from typing import Callable, Sequence

from agv_rebrand.canvas.types import (
    Candidate,
    LayoutParams,
    LayoutPlan,
    PlacedLine,
    TextFlow,
    ThumbnailSlot,
)

MeasureFn = Callable[[str], float]

_ROW_ADVANCE_FACTOR = 1.05


def plan_layout(canvas_width: int, canvas_height: int, params: LayoutParams | None = None) -> LayoutPlan:
    params = params or LayoutParams.from_settings()
    split_x = math.floor(canvas_width * params.text_fraction)

    text_x = params.margin
    text_width = split_x - 2 * params.margin
    thumbs_x = split_x + params.thumbs_offset
    thumbs_width = canvas_width - thumbs_x - params.margin

    thumb_cols = max(1, params.thumb_columns)
    thumb_cell_width = max(1, (thumbs_width - (thumb_cols - 1) * params.thumb_gap) // thumb_cols)

    text_cols = max(1, params.text_columns)
    text_column_width = max(1, (text_width - (text_cols - 1) * params.text_column_gap) // text_cols)

    return LayoutPlan(
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        text_x=text_x,
        text_width=text_width,
        thumbs_x=thumbs_x,
        thumbs_width=thumbs_width,
        thumb_cell_width=thumb_cell_width,
        text_column_width=text_column_width,
        params=params,
    )


def thumbnail_slots(plan: LayoutPlan, candidates: Sequence[Candidate]) -> list[ThumbnailSlot]:
    """Place up to ``max_thumbnails`` candidates row-major in the right region.

    Each cell keeps its source aspect ratio at the shared cell width; a row
    advances by its tallest cell (x1.05) plus the gap.
    """
    params = plan.params
    cols = max(1, params.thumb_columns)
    cell_w = plan.thumb_cell_width

    slots: list[ThumbnailSlot] = []
    row_y = params.top
    row_height = 0
    for i, candidate in enumerate(candidates[: params.max_thumbnails]):
        col = i % cols
        if i > 0 and col == 0:
            row_y += row_height + params.thumb_gap
            row_height = 0
        region = candidate.region
        cell_h = max(1, math.floor(region.height / max(1, region.width) * cell_w))
        row_height = max(row_height, math.floor(cell_h * _ROW_ADVANCE_FACTOR))
        slots.append(
            ThumbnailSlot(
                x=plan.thumbs_x + col * (cell_w + params.thumb_gap),
                y=row_y,
                width=cell_w,
                height=cell_h,
            )
        )
    return slots


def wrap_words(text: str, max_width: float, measure: MeasureFn) -> list[str]:
    # Words are never split; an over-wide word gets a line of its own.
    lines: list[str] = []
    line = ""
    for word in text.split():
        test = f"{line} {word}" if line else word
        if line and measure(test) > max_width:
            lines.append(line)
            line = word
        else:
            line = test
    if line:
        lines.append(line)
    return lines


def flow_text(text_lines: Sequence[str], plan: LayoutPlan, measure: MeasureFn) -> TextFlow:
    """Wrap text lines into the left-hand columns.

    The column switch is checked after each source line. Once every column is
    used the rest is dropped and counted in ``TextFlow.dropped``.
    """
    params = plan.params
    cols = max(1, params.text_columns)
    flow = TextFlow()

    y = params.top
    col = 0
    for i, text in enumerate(text_lines):
        x = plan.text_column_x(col)
        for wrapped in wrap_words(text, plan.text_column_width, measure):
            flow.lines.append(PlacedLine(x=x, y=y, text=wrapped))
            y += params.line_height
        if y > plan.text_bottom:
            y = params.top
            col += 1
            if col >= cols:
                flow.dropped = len(text_lines) - i - 1
                break
    return flow
