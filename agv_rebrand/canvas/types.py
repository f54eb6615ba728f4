from __future__ import annotations

from dataclasses import dataclass, field

from agv_rebrand.config import settings


@dataclass(frozen=True, slots=True)
class Region:
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.x + self.width, self.y + self.height

    def fits_within(self, width: int, height: int) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.width > 0
            and self.height > 0
            and self.x + self.width <= width
            and self.y + self.height <= height
        )


@dataclass(frozen=True, slots=True)
class Candidate:
    region: Region
    variance: float
    skin_ratio: float
    skin_weight: float = 1000.0

    @property
    def score(self) -> float:
        return self.variance + self.skin_weight * self.skin_ratio


@dataclass(frozen=True, slots=True)
class ScanParams:
    cols: int = 7
    rows: int = 5
    min_variance: float = 800.0
    skin_ratio_threshold: float = 0.02
    skin_weight: float = 1000.0

    @classmethod
    def from_settings(cls) -> ScanParams:
        return cls(
            cols=settings.grid_cols,
            rows=settings.grid_rows,
            min_variance=settings.thumb_min_variance,
            skin_ratio_threshold=settings.skin_ratio_threshold,
            skin_weight=settings.skin_weight,
        )


@dataclass(frozen=True, slots=True)
class LayoutParams:
    margin: int = 48
    text_fraction: float = 0.52
    thumbs_offset: int = 16
    thumb_columns: int = 3
    thumb_gap: int = 12
    max_thumbnails: int = 30
    text_columns: int = 2
    text_column_gap: int = 24
    line_height: int = 26
    top: int = 150
    footer_margin: int = 300

    @classmethod
    def from_settings(cls) -> LayoutParams:
        return cls(
            thumb_columns=settings.thumb_columns,
            thumb_gap=settings.thumb_gap,
            max_thumbnails=settings.max_thumbnails,
            text_columns=settings.text_columns,
            text_column_gap=settings.text_column_gap,
            line_height=settings.text_line_height,
            top=settings.layout_top,
            footer_margin=settings.footer_margin,
        )


@dataclass(frozen=True, slots=True)
class LayoutPlan:
    canvas_width: int
    canvas_height: int
    text_x: int
    text_width: int
    thumbs_x: int
    thumbs_width: int
    thumb_cell_width: int
    text_column_width: int
    params: LayoutParams

    @property
    def text_bottom(self) -> int:
        return self.canvas_height - self.params.footer_margin

    def text_column_x(self, index: int) -> int:
        return self.text_x + index * (self.text_column_width + self.params.text_column_gap)


@dataclass(frozen=True, slots=True)
class ThumbnailSlot:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class PlacedLine:
    x: int
    y: int
    text: str


@dataclass(slots=True)
class TextFlow:
    lines: list[PlacedLine] = field(default_factory=list)
    dropped: int = 0


@dataclass(slots=True)
class LogoOutcome:
    placed: bool
    reason: str | None = None


@dataclass(slots=True)
class ThumbnailOutcome:
    index: int
    slot: ThumbnailSlot
    placed: bool
    reason: str | None = None


@dataclass(slots=True)
class RenderResult:
    png_bytes: bytes
    width: int
    height: int
    logo: LogoOutcome
    thumbnails: list[ThumbnailOutcome]
    lines_drawn: int
    lines_dropped: int

    @property
    def thumbnails_placed(self) -> int:
        return sum(1 for t in self.thumbnails if t.placed)
