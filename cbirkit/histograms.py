"""Colour histograms of whole images and of image regions.

Every histogram is returned as a ``float32`` array rescaled so that its
smallest bin is 0 and its largest bin is 1. Colour histograms are indexed
``[blue, green, red]``.
"""

from __future__ import annotations

import numpy as np

from .imaging import bgr_to_hsv, normalize_minmax

_CHANNEL_RANGE = 256
_HUE_RANGE = 180


def _colour_image(src: np.ndarray) -> np.ndarray:
    data = np.asarray(src)
    if data.ndim != 3 or data.shape[2] < 3:
        raise ValueError(f"expected a BGR image, got shape {data.shape}")
    return data


def _check_bins(*bins: int) -> None:
    if any(count <= 0 for count in bins):
        raise ValueError("bin counts must be positive")


def _rgb_counts(pixels: np.ndarray, bins: int) -> np.ndarray:
    """Normalized 3D histogram of the first three channels over [0, 256)."""
    _check_bins(bins)
    values = pixels[..., :3].reshape(-1, 3).astype(np.int64)
    inside = np.all((values >= 0) & (values < _CHANNEL_RANGE), axis=1)
    idx = values[inside] * bins // _CHANNEL_RANGE
    flat = (idx[:, 0] * bins + idx[:, 1]) * bins + idx[:, 2]
    counts = np.bincount(flat, minlength=bins**3).reshape(bins, bins, bins)
    return normalize_minmax(counts, 0.0, 1.0)


def generate_histogram(src: np.ndarray, histsize: int = 16) -> np.ndarray:
    """2D rg-chromaticity histogram of shape ``(histsize, histsize)``.

    Each pixel falls in bin ``[r, g]`` where ``r = R / (R + G + B)`` and
    ``g = G / (R + G + B)`` are scaled by ``histsize - 1`` and truncated.
    """
    _check_bins(histsize)
    data = _colour_image(src)[..., :3].astype(np.float32)
    blue, green, red = data[..., 0], data[..., 1], data[..., 2]
    total = red + green + blue
    total = np.where(total > 0, total, np.float32(1.0))
    scale = np.float32(histsize - 1)
    idx_r = ((red / total) * scale).astype(np.int64).ravel()
    idx_g = ((green / total) * scale).astype(np.int64).ravel()
    counts = np.bincount(idx_r * histsize + idx_g, minlength=histsize * histsize)
    return normalize_minmax(counts.reshape(histsize, histsize), 0.0, 1.0)


def generate_rgb_histogram(src: np.ndarray, bins: int = 8) -> np.ndarray:
    """3D colour histogram of shape ``(bins, bins, bins)`` over the whole image."""
    return _rgb_counts(_colour_image(src), bins)


def generate_centered_region_histogram(
    src: np.ndarray, bins: int, region_fraction: float
) -> np.ndarray:
    """3D colour histogram of a centred block covering ``region_fraction`` of each side."""
    data = _colour_image(src)
    height, width = data.shape[:2]
    region_width = int(width * region_fraction)
    region_height = int(height * region_fraction)
    x_start = width // 2 - region_width // 2
    y_start = height // 2 - region_height // 2
    if (
        region_width < 0
        or region_height < 0
        or x_start < 0
        or y_start < 0
        or x_start + region_width > width
        or y_start + region_height > height
    ):
        raise ValueError(f"region fraction {region_fraction} does not fit the image")
    region = data[y_start : y_start + region_height, x_start : x_start + region_width]
    return _rgb_counts(region, bins)


def generate_hue_saturation_histogram(
    src: np.ndarray, h_bins: int, s_bins: int, use_half: bool
) -> np.ndarray:
    """2D hue/saturation histogram of shape ``(h_bins, s_bins)``.

    With ``use_half`` only the lower half of the image rows is counted.
    """
    _check_bins(h_bins, s_bins)
    data = _colour_image(src)
    hsv = bgr_to_hsv(data)
    from_row = data.shape[0] // 2 if use_half else 0
    part = hsv[from_row:].reshape(-1, 3).astype(np.int64)
    hue_idx = part[:, 0] * h_bins // _HUE_RANGE
    sat_idx = part[:, 1] * s_bins // _CHANNEL_RANGE
    inside = hue_idx < h_bins
    flat = hue_idx[inside] * s_bins + sat_idx[inside]
    counts = np.bincount(flat, minlength=h_bins * s_bins)
    return normalize_minmax(counts.reshape(h_bins, s_bins), 0.0, 1.0)


def _leading_rows(src: np.ndarray, fraction: float) -> np.ndarray:
    data = _colour_image(src)
    rows = int(data.shape[0] * fraction)
    if rows < 0 or rows > data.shape[0]:
        raise ValueError(f"row fraction {fraction} does not fit the image")
    return data[:rows]


def generate_histogram_top(src: np.ndarray, bins: int, top_percentage: float) -> np.ndarray:
    """3D colour histogram of the first ``top_percentage`` of the image rows."""
    return _rgb_counts(_leading_rows(src, top_percentage), bins)


def generate_histogram_bot(src: np.ndarray, bins: int, bot_percentage: float) -> np.ndarray:
    """3D colour histogram of the first ``bot_percentage`` of the image rows.

    The block is taken from the top edge, exactly as for
    :func:`generate_histogram_top`.
    """
    return _rgb_counts(_leading_rows(src, bot_percentage), bins)