"""Image loading, saving and basic pixel conversions on numpy arrays.

Colour images are ``uint8`` arrays of shape ``(height, width, 3)`` in BGR
channel order. Grayscale images are ``uint8`` arrays of shape
``(height, width)``.
"""

from __future__ import annotations

from os import PathLike
from typing import Union

import numpy as np
from PIL import Image

PathType = Union[str, "PathLike[str]"]

# Fixed-point luma weights (scaled by 2**14) for B, G and R.
_GRAY_SHIFT = 14
_GRAY_WEIGHTS = np.array([1868, 9617, 4899], dtype=np.int64)


def load_image(path: PathType, grayscale: bool = False) -> np.ndarray:
    """Read an image file as a BGR array, or as a grayscale array.

    Raises ``OSError`` when the file is missing or is not a readable image.
    """
    with Image.open(path) as img:
        rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
    bgr = np.ascontiguousarray(rgb[..., ::-1])
    return bgr_to_gray(bgr) if grayscale else bgr


def save_image(path: PathType, image: np.ndarray) -> None:
    """Write a BGR or grayscale array to ``path``; the format follows the suffix."""
    data = np.asarray(image)
    if data.dtype != np.uint8:
        data = np.clip(np.rint(data), 0, 255).astype(np.uint8)
    if data.ndim == 2:
        Image.fromarray(data, mode="L").save(path)
    elif data.ndim == 3 and data.shape[2] == 3:
        Image.fromarray(np.ascontiguousarray(data[..., ::-1]), mode="RGB").save(path)
    else:
        raise ValueError(f"cannot save an image of shape {data.shape}")


def bgr_to_gray(image: np.ndarray) -> np.ndarray:
    """Convert a BGR image to grayscale with the standard luma weights."""
    data = np.asarray(image)
    if data.ndim == 2:
        return data.astype(np.uint8, copy=True)
    if data.ndim != 3 or data.shape[2] < 3:
        raise ValueError(f"expected a BGR image, got shape {data.shape}")
    pixels = data[..., :3].astype(np.int64)
    gray = (pixels @ _GRAY_WEIGHTS + (1 << (_GRAY_SHIFT - 1))) >> _GRAY_SHIFT
    return np.clip(gray, 0, 255).astype(np.uint8)


def bgr_to_hsv(image: np.ndarray) -> np.ndarray:
    """Convert a BGR image to 8-bit HSV (hue in 0..179, saturation and value in 0..255)."""
    data = np.asarray(image)
    if data.ndim != 3 or data.shape[2] < 3:
        raise ValueError(f"expected a BGR image, got shape {data.shape}")
    b, g, r = (data[..., k].astype(np.float64) for k in range(3))
    value = np.maximum(np.maximum(b, g), r)
    low = np.minimum(np.minimum(b, g), r)
    diff = value - low

    saturation = np.divide(
        255.0 * diff, value, out=np.zeros_like(value), where=value > 0
    )

    safe_diff = np.where(diff == 0, 1.0, diff)
    hue = np.where(
        value == r,
        60.0 * (g - b) / safe_diff,
        np.where(
            value == g,
            120.0 + 60.0 * (b - r) / safe_diff,
            240.0 + 60.0 * (r - g) / safe_diff,
        ),
    )
    hue = np.where(diff == 0, 0.0, hue)
    hue = np.where(hue < 0, hue + 360.0, hue)
    hue = np.mod(np.rint(hue / 2.0), 180.0)

    hsv = np.stack([hue, np.rint(saturation), value], axis=-1)
    return np.clip(hsv, 0, 255).astype(np.uint8)


def _linear_axis(src_len: int, dst_len: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    scale = src_len / dst_len
    pos = (np.arange(dst_len, dtype=np.float64) + 0.5) * scale - 0.5
    pos = np.clip(pos, 0.0, src_len - 1)
    lower = np.floor(pos).astype(np.int64)
    upper = np.minimum(lower + 1, src_len - 1)
    return lower, upper, pos - lower


def resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize with bilinear interpolation to ``width`` x ``height`` pixels."""
    if width <= 0 or height <= 0:
        raise ValueError("target width and height must be positive")
    data = np.asarray(image)
    if data.ndim < 2 or data.shape[0] == 0 or data.shape[1] == 0:
        raise ValueError(f"cannot resize an image of shape {data.shape}")

    work = data.astype(np.float64)
    extra = (1,) * (data.ndim - 2)

    top, bottom, wy = _linear_axis(data.shape[0], height)
    wy = wy.reshape((height, 1) + extra)
    work = work[top] * (1.0 - wy) + work[bottom] * wy

    left, right, wx = _linear_axis(data.shape[1], width)
    wx = wx.reshape((1, width) + extra)
    work = work[:, left] * (1.0 - wx) + work[:, right] * wx

    if np.issubdtype(data.dtype, np.integer):
        info = np.iinfo(data.dtype)
        return np.clip(np.rint(work), info.min, info.max).astype(data.dtype)
    return work.astype(data.dtype)


def normalize_minmax(array: np.ndarray, low: float = 0.0, high: float = 1.0) -> np.ndarray:
    """Linearly rescale values so the minimum maps to ``low`` and the maximum to ``high``.

    A constant array maps entirely to ``low``. The result is ``float32``.
    """
    data = np.asarray(array, dtype=np.float64)
    if data.size == 0:
        return data.astype(np.float32)
    smin = float(data.min())
    smax = float(data.max())
    span = smax - smin
    scale = (high - low) / span if span > np.finfo(np.float64).eps else 0.0
    return ((data - smin) * scale + low).astype(np.float32)