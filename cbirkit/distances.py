"""Distance and similarity measures between images, histograms and vectors."""

from __future__ import annotations

import numpy as np

_SSD_HALF = 3


def ssd(src: np.ndarray, dst: np.ndarray) -> float:
    """Sum of squared differences over the 7x7 block at the centre of ``src``.

    The same block position is read from ``dst``. Both images need at least
    three channels and must contain that block.
    """
    a = np.asarray(src)
    b = np.asarray(dst)
    if a.ndim != 3 or b.ndim != 3 or a.shape[2] < 3 or b.shape[2] < 3:
        raise ValueError("ssd needs two colour images")
    row = a.shape[0] // 2
    col = a.shape[1] // 2
    rows = slice(row - _SSD_HALF, row + _SSD_HALF + 1)
    cols = slice(col - _SSD_HALF, col + _SSD_HALF + 1)
    if row < _SSD_HALF or col < _SSD_HALF:
        raise ValueError("image is too small for a 7x7 centre block")
    block_a = a[rows, cols, :3]
    block_b = b[rows, cols, :3]
    side = 2 * _SSD_HALF + 1
    if block_a.shape[:2] != (side, side) or block_b.shape[:2] != (side, side):
        raise ValueError("image is too small for a 7x7 centre block")
    diff = block_a.astype(np.int64) - block_b.astype(np.int64)
    return float(np.sum(diff * diff))


def _intersection(hist_a: np.ndarray, hist_b: np.ndarray, ndim: int) -> float:
    a = np.asarray(hist_a, dtype=np.float64)
    b = np.asarray(hist_b, dtype=np.float64)
    if a.ndim != ndim or b.ndim != ndim:
        raise ValueError(f"expected {ndim}-dimensional histograms")
    if a.shape != b.shape:
        raise ValueError(f"histogram shapes differ: {a.shape} and {b.shape}")
    return float(np.minimum(a, b).sum())


def histogram_intersection(hist_a: np.ndarray, hist_b: np.ndarray) -> float:
    """Sum of bin-wise minimums of two 2D histograms; larger means more alike."""
    return _intersection(hist_a, hist_b, 2)


def histogram_intersection_3d(hist_a: np.ndarray, hist_b: np.ndarray) -> float:
    """Sum of bin-wise minimums of two 3D histograms; larger means more alike."""
    return _intersection(hist_a, hist_b, 3)


def cosine_distance(v1, v2) -> float:
    """One minus the cosine similarity of two equally long vectors.

    Any array shape is flattened first. A zero vector gives ``nan``.
    """
    a = np.asarray(v1, dtype=np.float64).ravel()
    b = np.asarray(v2, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise ValueError(f"vector lengths differ: {a.size} and {b.size}")
    denom = np.sqrt(np.dot(a, a)) * np.sqrt(np.dot(b, b))
    with np.errstate(divide="ignore", invalid="ignore"):
        cosine = np.float64(np.dot(a, b)) / denom
    return float(1.0 - cosine)