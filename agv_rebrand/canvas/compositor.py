from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont, ImageOps

from agv_rebrand.canvas.layout import flow_text, plan_layout, thumbnail_slots
from agv_rebrand.canvas.types import (
    Candidate,
    LayoutParams,
    LayoutPlan,
    LogoOutcome,
    RenderResult,
    ThumbnailOutcome,
)
from agv_rebrand.config import settings

logger = logging.getLogger(__name__)

_WHITE = (255, 255, 255, 255)
_LOGO_RIGHT_OFFSET = 36
_LOGO_TOP = 30
_TITLE_Y = 40
_FOOTER_TITLE_OFFSET = 140
_FOOTER_SUBTITLE_OFFSET = 100


@dataclass(slots=True)
class BrandingAssets:
    width: int
    height: int
    background_path: str | None
    background_color: str
    logo_path: str | None
    logo_width: int
    title_prefix: str
    footer_title: str
    footer_subtitle: str
    border_px: int = 3
    border_alpha: int = 150

    @classmethod
    def from_settings(cls) -> BrandingAssets:
        return cls(
            width=settings.output_width,
            height=settings.output_height,
            background_path=settings.background_path,
            background_color=settings.background_color,
            logo_path=settings.logo_path,
            logo_width=settings.logo_width,
            title_prefix=settings.title_prefix,
            footer_title=settings.footer_title,
            footer_subtitle=settings.footer_subtitle,
            border_px=settings.thumb_border_px,
            border_alpha=settings.thumb_border_alpha,
        )


@dataclass(slots=True)
class FontSet:
    title: ImageFont.FreeTypeFont | ImageFont.ImageFont
    heading: ImageFont.FreeTypeFont | ImageFont.ImageFont
    body: ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_fonts(font_path: str | None = None) -> FontSet:
    """Load the three text sizes (64/32/16). Errors propagate to the caller."""
    path = font_path if font_path is not None else settings.font_path
    if path:
        return FontSet(
            title=ImageFont.truetype(path, 64),
            heading=ImageFont.truetype(path, 32),
            body=ImageFont.truetype(path, 16),
        )
    return FontSet(
        title=ImageFont.load_default(size=64),
        heading=ImageFont.load_default(size=32),
        body=ImageFont.load_default(size=16),
    )


def load_background(assets: BrandingAssets) -> Image.Image:
    size = (assets.width, assets.height)
    path = Path(assets.background_path) if assets.background_path else None
    if path is not None and path.exists():
        with Image.open(path) as img:
            return img.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
    return Image.new("RGBA", size, assets.background_color)


def place_logo(canvas: Image.Image, assets: BrandingAssets) -> LogoOutcome:
    path = Path(assets.logo_path) if assets.logo_path else None
    if path is None or not path.exists():
        return LogoOutcome(placed=False, reason="logo asset not found")

    try:
        with Image.open(path) as img:
            logo = img.convert("RGBA")
        logo_h = max(1, round(logo.height * assets.logo_width / logo.width))
        logo = logo.resize((assets.logo_width, logo_h), Image.Resampling.LANCZOS)
        canvas.alpha_composite(logo, dest=(canvas.width - logo.width - _LOGO_RIGHT_OFFSET, _LOGO_TOP))
    except Exception as exc:  # noqa: BLE001 - logo is cosmetic
        logger.warning("logo overlay skipped: %s", exc)
        return LogoOutcome(placed=False, reason=f"logo overlay failed: {exc}")
    return LogoOutcome(placed=True)


def _border_frame(size: tuple[int, int], width: int, alpha: int) -> Image.Image:
    frame = Image.new("RGBA", size, (0, 0, 0, 0))
    if width > 0:
        ImageDraw.Draw(frame).rectangle(
            [0, 0, size[0] - 1, size[1] - 1],
            outline=(255, 255, 255, alpha),
            width=width,
        )
    return frame


def place_thumbnails(
    canvas: Image.Image,
    source_bytes: bytes,
    candidates: Sequence[Candidate],
    plan: LayoutPlan,
    assets: BrandingAssets,
) -> list[ThumbnailOutcome]:
    slots = thumbnail_slots(plan, candidates)
    if not slots:
        return []

    try:
        with Image.open(io.BytesIO(source_bytes)) as img:
            source = img.convert("RGBA")
    except Exception as exc:  # noqa: BLE001 - every slot degrades to a gap
        logger.warning("thumbnail source could not be decoded: %s", exc)
        return [
            ThumbnailOutcome(index=i, slot=slot, placed=False, reason=f"source decode failed: {exc}")
            for i, slot in enumerate(slots)
        ]

    outcomes: list[ThumbnailOutcome] = []
    for i, (candidate, slot) in enumerate(zip(candidates, slots)):
        region = candidate.region
        try:
            if not region.fits_within(source.width, source.height):
                raise ValueError(
                    f"region {region.box} outside source {source.width}x{source.height}"
                )
            thumb = ImageOps.fit(
                source.crop(region.box),
                (slot.width, slot.height),
                method=Image.Resampling.LANCZOS,
                centering=(0.5, 0.5),
            )
            canvas.alpha_composite(thumb, dest=(slot.x, slot.y))
            canvas.alpha_composite(
                _border_frame(thumb.size, assets.border_px, assets.border_alpha),
                dest=(slot.x, slot.y),
            )
        except Exception as exc:  # noqa: BLE001 - one bad slot leaves a gap
            logger.warning("thumbnail %d skipped: %s", i, exc)
            outcomes.append(ThumbnailOutcome(index=i, slot=slot, placed=False, reason=str(exc)))
            continue
        outcomes.append(ThumbnailOutcome(index=i, slot=slot, placed=True))
    return outcomes


def render_rebranded_image(
    source_bytes: bytes,
    candidates: Sequence[Candidate],
    text_lines: Sequence[str],
    identifier: str,
    *,
    assets: BrandingAssets | None = None,
    fonts: FontSet | None = None,
    layout_params: LayoutParams | None = None,
) -> RenderResult:
    """Compose background, logo, title, thumbnails, text and footer into a PNG.

    Background and font failures raise. Logo and per-thumbnail failures are
    reported in the returned ``RenderResult`` instead.
    """
    assets = assets or BrandingAssets.from_settings()
    fonts = fonts or load_fonts()

    canvas = load_background(assets)
    plan = plan_layout(assets.width, assets.height, layout_params)

    logo = place_logo(canvas, assets)

    draw = ImageDraw.Draw(canvas)
    draw.text((plan.text_x, _TITLE_Y), f"{assets.title_prefix} - {identifier}", font=fonts.title, fill=_WHITE)

    thumbnails = place_thumbnails(canvas, source_bytes, candidates, plan, assets)

    flow = flow_text(text_lines, plan, fonts.body.getlength)
    draw = ImageDraw.Draw(canvas)
    for line in flow.lines:
        draw.text((line.x, line.y), line.text, font=fonts.body, fill=_WHITE)

    # Footer goes last and covers any overflow beneath it.
    draw.text(
        (plan.text_x, assets.height - _FOOTER_TITLE_OFFSET),
        assets.footer_title,
        font=fonts.heading,
        fill=_WHITE,
    )
    draw.text(
        (plan.text_x, assets.height - _FOOTER_SUBTITLE_OFFSET),
        assets.footer_subtitle,
        font=fonts.body,
        fill=_WHITE,
    )

    buffer = io.BytesIO()
    canvas.convert("RGB").save(buffer, format="PNG")
    return RenderResult(
        png_bytes=buffer.getvalue(),
        width=canvas.width,
        height=canvas.height,
        logo=logo,
        thumbnails=thumbnails,
        lines_drawn=len(flow.lines),
        lines_dropped=flow.dropped,
    )
