"""Edge, frequency and texture features of images."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
from scipy import ndimage

from .histograms import generate_rgb_histogram
from .imaging import bgr_to_gray, normalize_minmax, resize

_GRAY_LEVELS = 256

_L5 = np.array([1, 4, 6, 4, 1], dtype=np.float32)
_E5 = np.array([-1, -2, 0, 2, 1], dtype=np.float32)
_S5 = np.array([-1, 0, 2, 0, -1], dtype=np.float32)
_W5 = np.array([-1, 2, 0, -2, 1], dtype=np.float32)
_R5 = np.array([1, -4, 6, -4, 1], dtype=np.float32)

_SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)


@dataclass(frozen=True)
class TextureFeatures:
    """Summary statistics of a co-occurrence matrix."""

    energy: float
    entropy: float
    contrast: float
    homogeneity: float


def _colour_image(src: np.ndarray) -> np.ndarray:
    data = np.asarray(src)
    if data.ndim != 3 or data.shape[2] < 3:
        raise ValueError(f"expected a BGR image, got shape {data.shape}")
    return data


def _to_gray(src: np.ndarray) -> np.ndarray:
    data = np.asarray(src)
    if data.ndim == 3 and data.shape[2] > 1:
        return bgr_to_gray(data)
    if data.ndim == 3:
        return data[..., 0].copy()
    return data.copy()


def _saturate_u8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _filter(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Correlate with a kernel centred on each pixel, reflecting at the borders."""
    return ndimage.correlate(
        np.asarray(image, dtype=np.float64), np.asarray(kernel, dtype=np.float64), mode="mirror"
    )


def sobel_x_3x3(src: np.ndarray) -> np.ndarray:
    """Horizontal 3x3 Sobel response per channel as ``int16``; border pixels stay 0."""
    data = _colour_image(src)[..., :3].astype(np.int32)
    out = np.zeros(data.shape, dtype=np.int16)
    if data.shape[0] < 3 or data.shape[1] < 3:
        return out
    left = data[:, :-2]
    right = data[:, 2:]
    diff = right - left
    out[1:-1, 1:-1] = diff[:-2] + 2 * diff[1:-1] + diff[2:]
    return out


def sobel_y_3x3(src: np.ndarray) -> np.ndarray:
    """Vertical 3x3 Sobel response per channel as ``int16``; border pixels stay 0."""
    data = _colour_image(src)[..., :3].astype(np.int32)
    out = np.zeros(data.shape, dtype=np.int16)
    if data.shape[0] < 3 or data.shape[1] < 3:
        return out
    diff = data[2:] - data[:-2]
    out[1:-1, 1:-1] = diff[:, :-2] + 2 * diff[:, 1:-1] + diff[:, 2:]
    return out


def magnitude(sx: np.ndarray, sy: np.ndarray) -> np.ndarray:
    """Per-element gradient magnitude ``sqrt(sx**2 + sy**2)``, truncated to ``int16``."""
    a = np.asarray(sx, dtype=np.int64)
    b = np.asarray(sy, dtype=np.int64)
    if a.shape != b.shape:
        raise ValueError(f"gradient shapes differ: {a.shape} and {b.shape}")
    return np.trunc(np.sqrt((a * a + b * b).astype(np.float64))).astype(np.int16)


def calculate_magnitude_histogram(src: np.ndarray, bins: int) -> np.ndarray:
    """Normalized 3D histogram for the gradient-magnitude task.

    The bins count the colour values of ``src`` itself, so the result equals
    the whole-image colour histogram.
    """
    return generate_rgb_histogram(_colour_image(src), bins)


def _optimal_dft_size(n: int) -> int:
    size = max(n, 1)
    while True:
        rest = size
        for prime in (2, 3, 5):
            while rest % prime == 0:
                rest //= prime
        if rest == 1:
            return size
        size += 1


def compute_fourier_features(
    src: np.ndarray, feature_size: Sequence[int] = (16, 16)
) -> np.ndarray:
    """Log-magnitude spectrum, rescaled to [0, 1] and resized to ``(width, height)``.

    The returned array has shape ``(height, width)`` and dtype ``float32``.
    """
    width, height = feature_size
    gray = _to_gray(src).astype(np.float32)
    rows, cols = gray.shape
    padded = np.zeros((_optimal_dft_size(rows), _optimal_dft_size(cols)), dtype=np.float32)
    padded[:rows, :cols] = gray

    spectrum = np.abs(np.fft.fft2(padded)).astype(np.float32)
    spectrum = np.log(spectrum + np.float32(1.0))
    spectrum = spectrum[: spectrum.shape[0] & -2, : spectrum.shape[1] & -2]
    spectrum = normalize_minmax(spectrum, 0.0, 1.0)
    return resize(spectrum, width, height)


def calculate_co_occurrence_matrix(gray: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """256x256 count of gray-level pairs ``(pixel, pixel at offset (dx, dy))``."""
    data = np.asarray(gray)
    if data.ndim != 2:
        raise ValueError(f"expected a grayscale image, got shape {data.shape}")
    rows, cols = data.shape
    co_mat = np.zeros((_GRAY_LEVELS, _GRAY_LEVELS), dtype=np.float32)
    if abs(dx) >= cols or abs(dy) >= rows:
        return co_mat
    y_src = slice(max(0, -dy), rows - max(0, dy))
    x_src = slice(max(0, -dx), cols - max(0, dx))
    y_dst = slice(max(0, dy), rows - max(0, -dy))
    x_dst = slice(max(0, dx), cols - max(0, -dx))
    first = data[y_src, x_src].astype(np.int64).ravel()
    second = data[y_dst, x_dst].astype(np.int64).ravel()
    counts = np.bincount(first * _GRAY_LEVELS + second, minlength=_GRAY_LEVELS**2)
    co_mat += counts[: _GRAY_LEVELS**2].reshape(_GRAY_LEVELS, _GRAY_LEVELS)
    return co_mat


def normalize_co_occurrence_matrix(co_mat: np.ndarray) -> np.ndarray:
    """Rescale a co-occurrence matrix to the range [0, 1]."""
    return normalize_minmax(co_mat, 0.0, 1.0)


def calculate_texture_features(co_mat: np.ndarray) -> TextureFeatures:
    """Energy, entropy, contrast and homogeneity of a co-occurrence matrix."""
    values = np.asarray(co_mat, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError("expected a 2D co-occurrence matrix")
    i, j = np.indices(values.shape)
    offset = i - j
    positive = values[values > 0]
    return TextureFeatures(
        energy=float(np.sum(values * values)),
        entropy=float(-np.sum(positive * np.log2(positive))),
        contrast=float(np.sum(offset * offset * values)),
        homogeneity=float(np.sum(values / (1 + np.abs(offset)))),
    )


def create_laws_filters() -> list[np.ndarray]:
    """The 5x5 Laws filters L5L5, L5E5, L5S5, E5L5 and E5E5."""
    pairs = ((_L5, _L5), (_L5, _E5), (_L5, _S5), (_E5, _L5), (_E5, _E5))
    return [np.outer(column, row).astype(np.float32) for column, row in pairs]


def apply_laws_filters_and_get_energy(
    src: np.ndarray, filters: Iterable[np.ndarray]
) -> list[np.ndarray]:
    """Absolute filter responses of the gray image, averaged over 5x5 windows (``uint8``)."""
    gray = _to_gray(src)
    box = np.ones((5, 5), dtype=np.float64)
    energies = []
    for kernel in filters:
        response = _saturate_u8(np.abs(_filter(gray, kernel).astype(np.float32)))
        energies.append(_saturate_u8(_filter(response, box) / box.size))
    return energies


def create_energy_histograms(
    energies: Iterable[np.ndarray], bins: int = 256
) -> list[np.ndarray]:
    """Raw ``float32`` histograms over [0, 256) of each energy map."""
    if bins <= 0:
        raise ValueError("bin count must be positive")
    histograms = []
    for energy in energies:
        values = np.asarray(energy).astype(np.int64).ravel()
        values = values[(values >= 0) & (values < _GRAY_LEVELS)]
        counts = np.bincount(values * bins // _GRAY_LEVELS, minlength=bins)
        histograms.append(counts.astype(np.float32))
    return histograms


def gabor_kernel(
    ksize: int, sigma: float, theta: float, lambd: float, gamma: float, psi: float
) -> np.ndarray:
    """Square real Gabor kernel of side ``2 * (ksize // 2) + 1`` as ``float32``."""
    if ksize <= 0:
        raise ValueError("kernel size must be positive")
    half = ksize // 2
    sigma_x = sigma
    sigma_y = sigma / gamma
    c, s = math.cos(theta), math.sin(theta)
    ex = -0.5 / (sigma_x * sigma_x)
    ey = -0.5 / (sigma_y * sigma_y)
    cscale = 2.0 * math.pi / lambd

    coords = np.arange(half, -half - 1, -1, dtype=np.float64)
    y = coords[:, None]
    x = coords[None, :]
    xr = x * c + y * s
    yr = -x * s + y * c
    kernel = np.exp(ex * xr * xr + ey * yr * yr) * np.cos(cscale * xr + psi)
    return kernel.astype(np.float32)


def compute_gabor_histogram(image: np.ndarray, bins: int = 256) -> np.ndarray:
    """Normalized histogram of the gray image filtered by a fixed diagonal Gabor kernel."""
    if bins <= 0:
        raise ValueError("bin count must be positive")
    gray = _to_gray(image)
    kernel = gabor_kernel(21, 4.0, math.pi / 4, 5.0, 0.5, math.pi / 2)
    filtered = _saturate_u8(_filter(gray, kernel).astype(np.float32))
    counts = np.bincount(filtered.astype(np.int64).ravel() * bins // _GRAY_LEVELS, minlength=bins)
    return normalize_minmax(counts, 0.0, 1.0)


def calculate_gradient_magnitude(src: np.ndarray) -> np.ndarray:
    """Averaged absolute Sobel gradients of the gray image, stretched to 0..255 (``uint8``)."""
    gray = _to_gray(src)
    grad_x = _saturate_u8(np.abs(_filter(gray, _SOBEL_X)))
    grad_y = _saturate_u8(np.abs(_filter(gray, _SOBEL_X.T)))
    combined = _saturate_u8(0.5 * grad_x.astype(np.float64) + 0.5 * grad_y.astype(np.float64))
    return _saturate_u8(normalize_minmax(combined, 0.0, 255.0))