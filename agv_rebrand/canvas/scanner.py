from __future__ import annotations

import numpy as np
from PIL import Image

from agv_rebrand.canvas.types import Candidate, Region, ScanParams


def _load_rgb(image: Image.Image | np.ndarray) -> np.ndarray:
    if isinstance(image, np.ndarray):
        if image.ndim == 2:
            return np.stack([image, image, image], axis=-1)
        return image[:, :, :3]
    return np.asarray(image.convert("RGB"), dtype=np.uint8)


def _luminance(rgb: np.ndarray) -> np.ndarray:
    weighted = 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]
    # Half-up rounding; np.round would round half to even.
    return np.floor(weighted + 0.5).astype(np.int64)


def _skin_mask(rgb: np.ndarray) -> np.ndarray:
    r = rgb[..., 0].astype(np.int16)
    g = rgb[..., 1].astype(np.int16)
    b = rgb[..., 2].astype(np.int16)
    # Coarse RGB rule, approximate on purpose.
    return (r > 90) & (g > 40) & (b > 20) & (r - g > 15) & (r - b > 15)


def _per_cell(values: np.ndarray, rows: int, cell_h: int, cols: int, cell_w: int) -> np.ndarray:
    return values.reshape(rows, cell_h, cols, cell_w).sum(axis=(1, 3))


def detect_candidates(
    image: Image.Image | np.ndarray,
    params: ScanParams | None = None,
) -> list[Candidate]:
    """Score every grid cell and keep the ones that look photographic.

    The image is split into ``params.cols`` x ``params.rows`` cells of
    ``floor(w / cols)`` x ``floor(h / rows)`` pixels; the right and bottom
    remainders are ignored. A cell is kept when its luminance variance reaches
    ``min_variance`` or its skin-tone ratio exceeds ``skin_ratio_threshold``.
    Results are ordered by ``variance + skin_weight * skin_ratio`` descending,
    ties keeping row-major scan order.
    """
    params = params or ScanParams.from_settings()
    rgb = _load_rgb(image)
    h, w = rgb.shape[:2]
    cell_w = w // params.cols if params.cols > 0 else 0
    cell_h = h // params.rows if params.rows > 0 else 0
    if cell_w == 0 or cell_h == 0:
        return []

    grid = rgb[: params.rows * cell_h, : params.cols * cell_w]
    lum = _luminance(grid)
    n = cell_w * cell_h

    sums = _per_cell(lum, params.rows, cell_h, params.cols, cell_w)
    sums_sq = _per_cell(lum * lum, params.rows, cell_h, params.cols, cell_w)
    skin_counts = _per_cell(
        _skin_mask(grid).astype(np.int64), params.rows, cell_h, params.cols, cell_w
    )

    candidates: list[Candidate] = []
    for ry in range(params.rows):
        for cx in range(params.cols):
            mean = float(sums[ry, cx]) / n
            variance = max(0.0, float(sums_sq[ry, cx]) / n - mean * mean)
            skin_ratio = float(skin_counts[ry, cx]) / n
            if variance < params.min_variance and skin_ratio <= params.skin_ratio_threshold:
                continue
            candidates.append(
                Candidate(
                    region=Region(x=cx * cell_w, y=ry * cell_h, width=cell_w, height=cell_h),
                    variance=variance,
                    skin_ratio=skin_ratio,
                    skin_weight=params.skin_weight,
                )
            )

    # sorted() is stable, so equal scores keep scan order.
    return sorted(candidates, key=lambda c: -c.score)
