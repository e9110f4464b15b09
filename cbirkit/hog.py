"""Histogram of oriented gradients descriptors and their comparison."""

from __future__ import annotations

import numpy as np

from .imaging import bgr_to_gray

_WIN_WIDTH = 64
_WIN_HEIGHT = 128
_BLOCK = 16
_BLOCK_STRIDE = 8
_CELL = 8
_WIN_STRIDE = 8
_NBINS = 9
_WIN_SIGMA = (_BLOCK + _BLOCK) / 8.0
_L2HYS_THRESHOLD = 0.2

NO_MATCH_SCORE = float(np.finfo(np.float32).max)


def _gray(image: np.ndarray) -> np.ndarray:
    data = np.asarray(image)
    if data.ndim == 3:
        return bgr_to_gray(data) if data.shape[2] > 1 else data[..., 0]
    if data.ndim != 2:
        raise ValueError(f"expected an image, got shape {data.shape}")
    return data


def _orientation_contributions(gray: np.ndarray) -> np.ndarray:
    """Per-pixel gradient magnitude split between the two nearest orientation bins."""
    img = np.sqrt(gray.astype(np.float64))
    padded = np.pad(img, 1, mode="reflect")
    dx = padded[1:-1, 2:] - padded[1:-1, :-2]
    dy = padded[2:, 1:-1] - padded[:-2, 1:-1]
    mag = np.hypot(dx, dy)
    angle = np.mod(np.degrees(np.arctan2(dy, dx)), 180.0)

    pos = angle * _NBINS / 180.0 - 0.5
    low = np.floor(pos)
    frac = pos - low
    low_idx = low.astype(np.int64) % _NBINS
    high_idx = (low_idx + 1) % _NBINS

    contrib = np.zeros(gray.shape + (_NBINS,), dtype=np.float64)
    np.put_along_axis(contrib, low_idx[..., None], (mag * (1.0 - frac))[..., None], axis=2)
    np.put_along_axis(contrib, high_idx[..., None], (mag * frac)[..., None], axis=2)
    return contrib


def _block_weights() -> tuple[np.ndarray, np.ndarray]:
    pos = np.arange(_BLOCK, dtype=np.float64) + 0.5
    gauss_1d = np.exp(-((pos - _BLOCK / 2.0) ** 2) / (2.0 * _WIN_SIGMA**2))
    gauss = np.outer(gauss_1d, gauss_1d)
    upper = np.clip(pos / _CELL - 0.5, 0.0, 1.0)
    cell = np.stack([1.0 - upper, upper])
    return gauss, cell


def _l2hys(vector: np.ndarray) -> np.ndarray:
    vector = vector / (np.sqrt(np.dot(vector, vector)) + 0.1 * vector.size)
    vector = np.minimum(vector, _L2HYS_THRESHOLD)
    return vector / (np.sqrt(np.dot(vector, vector)) + 1e-3)


def extract_hog_features(image: np.ndarray) -> np.ndarray:
    """HOG descriptor of every 64x128 window, windows 8 pixels apart, concatenated.

    Each window has 16x16 blocks on an 8-pixel grid, 8x8 cells and nine
    unsigned orientation bins, normalized with L2-Hys. Colour input is
    converted to gray first. The result is a ``float32`` vector.
    """
    gray = _gray(image)
    rows, cols = gray.shape
    if rows < _WIN_HEIGHT or cols < _WIN_WIDTH:
        raise ValueError(
            f"image of {cols}x{rows} is smaller than the {_WIN_WIDTH}x{_WIN_HEIGHT} window"
        )
    contrib = _orientation_contributions(gray)
    gauss, cell = _block_weights()
    weighted_cells = cell

    blocks_x = range(0, _WIN_WIDTH - _BLOCK + 1, _BLOCK_STRIDE)
    blocks_y = range(0, _WIN_HEIGHT - _BLOCK + 1, _BLOCK_STRIDE)
    parts = []
    for win_y in range(0, rows - _WIN_HEIGHT + 1, _WIN_STRIDE):
        for win_x in range(0, cols - _WIN_WIDTH + 1, _WIN_STRIDE):
            for bx in blocks_x:
                for by in blocks_y:
                    y0, x0 = win_y + by, win_x + bx
                    block = contrib[y0 : y0 + _BLOCK, x0 : x0 + _BLOCK] * gauss[..., None]
                    hist = np.einsum("cy,dx,yxb->dcb", weighted_cells, weighted_cells, block)
                    parts.append(_l2hys(hist.ravel()))
    return np.concatenate(parts).astype(np.float32)


def match_hog_features(descriptors1, descriptors2) -> float:
    """Euclidean distance between two descriptors of equal length.

    If either descriptor is empty the largest ``float32`` value is returned.
    """
    a = np.asarray(descriptors1, dtype=np.float64).ravel()
    b = np.asarray(descriptors2, dtype=np.float64).ravel()
    if a.size == 0 or b.size == 0:
        return NO_MATCH_SCORE
    if a.shape != b.shape:
        raise ValueError(f"descriptor lengths differ: {a.size} and {b.size}")
    return float(np.linalg.norm(a - b))