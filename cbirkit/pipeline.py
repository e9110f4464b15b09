"""Ranking of a directory of images against a target image by one of several features."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, Tuple

import numpy as np

from .distances import (
    cosine_distance,
    histogram_intersection,
    histogram_intersection_3d,
    ssd,
)
from .files import extract_filename, read_embeddings
from .histograms import (
    generate_centered_region_histogram,
    generate_histogram,
    generate_histogram_bot,
    generate_histogram_top,
    generate_hue_saturation_histogram,
    generate_rgb_histogram,
)
from .hog import extract_hog_features, match_hog_features
from .imaging import bgr_to_gray, load_image, resize
from .texture import (
    calculate_co_occurrence_matrix,
    calculate_magnitude_histogram,
    calculate_texture_features,
    compute_fourier_features,
    compute_gabor_histogram,
    normalize_co_occurrence_matrix,
)

Score = Tuple[str, float]


class PipelineError(RuntimeError):
    """Raised when a task cannot run: unreadable target or missing embedding."""


@dataclass(frozen=True)
class _Job:
    target_path: str
    target: np.ndarray
    files: Sequence[str]
    top_n: int
    embeddings_file_path: str


def _read(path: str, grayscale: bool = False) -> Optional[np.ndarray]:
    try:
        return load_image(path, grayscale=grayscale)
    except (OSError, ValueError):
        return None


def _images(
    files: Sequence[str], grayscale: bool = False, failure: Optional[str] = None
) -> Iterator[Tuple[str, np.ndarray]]:
    for path in files:
        image = _read(path, grayscale)
        if image is None:
            if failure:
                print(f"{failure}: {path}", file=sys.stderr)
            continue
        yield path, image


def _ranked(scores: list[Score], descending: bool) -> list[Score]:
    return sorted(scores, key=lambda item: item[1], reverse=descending)


def _target_embedding(job: _Job) -> tuple[dict[str, list[float]], list[float]]:
    try:
        embeddings = read_embeddings(job.embeddings_file_path)
    except OSError:
        embeddings = {}
    name = extract_filename(job.target_path)
    if name not in embeddings:
        raise PipelineError(f"Embedding not found for {name}")
    return embeddings, embeddings[name]


def _task_ssd(job: _Job) -> list[Score]:
    return _ranked([(p, ssd(job.target, img)) for p, img in _images(job.files)], False)


def _task_chromaticity(job: _Job) -> list[Score]:
    target_hist = generate_histogram(job.target, 16)
    scores = [
        (p, histogram_intersection(target_hist, generate_histogram(img, 16)))
        for p, img in _images(job.files)
    ]
    return _ranked(scores, True)


def _task_rgb(job: _Job) -> list[Score]:
    target_hist = generate_rgb_histogram(job.target, 8)
    scores = [
        (p, histogram_intersection_3d(target_hist, generate_rgb_histogram(img, 8)))
        for p, img in _images(job.files)
    ]
    return _ranked(scores, True)


def _task_whole_and_centre(job: _Job) -> list[Score]:
    target_whole = generate_rgb_histogram(job.target, 8)
    target_centre = generate_centered_region_histogram(job.target, 8, 0.5)
    scores = []
    for path, image in _images(job.files):
        whole = histogram_intersection_3d(target_whole, generate_rgb_histogram(image, 8))
        centre = histogram_intersection_3d(
            target_centre, generate_centered_region_histogram(image, 8, 0.5)
        )
        scores.append((path, (whole + centre) / 2))
    return _ranked(scores, True)


def _task_centre_and_hue(job: _Job) -> list[Score]:
    target_rgb = generate_centered_region_histogram(job.target, 8, 0.5)
    target_hs = generate_hue_saturation_histogram(job.target, 8, 8, False)
    scores = []
    for path, image in _images(job.files):
        rgb = histogram_intersection_3d(
            target_rgb, generate_centered_region_histogram(image, 8, 0.5)
        )
        hs = histogram_intersection(
            target_hs, generate_hue_saturation_histogram(image, 8, 8, True)
        )
        scores.append((path, (rgb + hs) / 2))
    return _ranked(scores, True)


def _task_top_and_bottom(job: _Job) -> list[Score]:
    target_top = generate_histogram_top(job.target, 8, 0.5)
    target_bot = generate_histogram_bot(job.target, 8, 0.5)
    scores = []
    for path, image in _images(job.files):
        top = histogram_intersection_3d(target_top, generate_histogram_top(image, 8, 0.5))
        bot = histogram_intersection_3d(target_bot, generate_histogram_bot(image, 8, 0.5))
        scores.append((path, (top + bot) / 2))
    return _ranked(scores, True)


def _task_colour_and_magnitude(job: _Job) -> list[Score]:
    target_whole = generate_rgb_histogram(job.target, 8)
    target_mag = calculate_magnitude_histogram(job.target, 8)
    scores = []
    for path, image in _images(job.files):
        whole = histogram_intersection_3d(target_whole, generate_rgb_histogram(image, 8))
        mag = histogram_intersection_3d(target_mag, calculate_magnitude_histogram(image, 8))
        scores.append((path, (whole + mag) / 2))
    return _ranked(scores, True)


def _task_fourier(job: _Job) -> list[Score]:
    target_features = compute_fourier_features(job.target)
    scores = [
        (
            p,
            float(
                np.linalg.norm(
                    target_features.astype(np.float64)
                    - compute_fourier_features(img).astype(np.float64)
                )
            ),
        )
        for p, img in _images(job.files, grayscale=True)
    ]
    return _ranked(scores, False)


def _task_co_occurrence(job: _Job) -> list[Score]:
    co_mat = calculate_co_occurrence_matrix(bgr_to_gray(job.target), 1, 0)
    features = calculate_texture_features(normalize_co_occurrence_matrix(co_mat))
    print("Texture Features for Target Image:")
    print(f"Energy: {features.energy:g}")
    print(f"Entropy: {features.entropy:g}")
    print(f"Contrast: {features.contrast:g}")
    print(f"Homogeneity: {features.homogeneity:g}")
    return []


def _task_embeddings(job: _Job) -> list[Score]:
    embeddings, target_embedding = _target_embedding(job)
    scores = []
    for path in job.files:
        vector = embeddings.get(extract_filename(path))
        if vector is not None:
            scores.append((path, cosine_distance(target_embedding, vector)))
    return _ranked(scores, False)


def _task_classic_vs_embeddings(job: _Job) -> list[Score]:
    embeddings, target_embedding = _target_embedding(job)
    target_hist = generate_rgb_histogram(job.target, 8)
    embedding_scores: list[Score] = []
    histogram_scores: list[Score] = []
    for path in job.files:
        vector = embeddings.get(extract_filename(path))
        if vector is not None:
            embedding_scores.append((path, cosine_distance(target_embedding, vector)))
        image = _read(path)
        if image is not None:
            hist = generate_rgb_histogram(image, 8)
            histogram_scores.append((path, histogram_intersection_3d(target_hist, hist)))

    embedding_scores = _ranked(embedding_scores, False)
    histogram_scores = _ranked(histogram_scores, False)
    print(f"Top {job.top_n} matches (Embedding Score vs. Histogram Score):")
    shown = min(job.top_n, len(embedding_scores), len(histogram_scores))
    for rank, ((path, e_score), (_, h_score)) in enumerate(
        zip(embedding_scores[:shown], histogram_scores[:shown]), start=1
    ):
        print(f"{rank}. {path} (E: {e_score:g} vs. H: {h_score:g})")
    return []


def _task_gabor_and_embeddings(job: _Job) -> list[Score]:
    target_gabor = compute_gabor_histogram(job.target, 256)
    embeddings, target_embedding = _target_embedding(job)
    scores = []
    for path, image in _images(job.files, failure="Failed to read image"):
        gabor = cosine_distance(target_gabor, compute_gabor_histogram(image, 256))
        vector = embeddings.get(extract_filename(path))
        if vector is not None:
            embedding = cosine_distance(target_embedding, vector)
            scores.append((path, (gabor + embedding) / 2.0))
    return _ranked(scores, False)


def _hog_of(image: np.ndarray) -> np.ndarray:
    return extract_hog_features(resize(bgr_to_gray(image), 64, 128))


def _task_hog(job: _Job) -> list[Score]:
    target_descriptors = _hog_of(job.target)
    scores = [
        (p, match_hog_features(target_descriptors, _hog_of(img)))
        for p, img in _images(job.files, failure="Failed to read image")
    ]
    scores = _ranked(scores, False)
    for rank, (path, score) in enumerate(scores[: max(job.top_n, 0)], start=1):
        print(f"Match {rank}: {path} with score {score:g}")
    return scores


def _task_spatial_colour(job: _Job) -> list[Score]:
    target_rgb = generate_rgb_histogram(job.target, 8)
    target_hs = generate_hue_saturation_histogram(job.target, 8, 8, True)
    scores = []
    for path, image in _images(job.files, failure="Failed to load image"):
        rgb = histogram_intersection_3d(target_rgb, generate_rgb_histogram(image, 8))
        hs = histogram_intersection(
            target_hs, generate_hue_saturation_histogram(image, 8, 8, True)
        )
        scores.append((path, (rgb + hs) / 2))
    return _ranked(scores, False)


_TASKS: dict[int, Callable[[_Job], list[Score]]] = {
    1: _task_ssd,
    2: _task_chromaticity,
    21: _task_rgb,
    3: _task_whole_and_centre,
    31: _task_centre_and_hue,
    32: _task_top_and_bottom,
    4: _task_colour_and_magnitude,
    41: _task_fourier,
    42: _task_co_occurrence,
    5: _task_embeddings,
    51: _task_embeddings,
    6: _task_classic_vs_embeddings,
    7: _task_gabor_and_embeddings,
    8: _task_hog,
    9: _task_spatial_colour,
}


def pipeline(
    target_path: str,
    files: Sequence[str],
    top_n: int,
    task_number: int,
    embeddings_file_path: str,
) -> list[Score]:
    """Score ``files`` against the target image with the feature of ``task_number``.

    Returns ``(path, score)`` pairs ordered best first. Tasks 42 and 6 only
    print their results and return an empty list, as does an unknown task.
    Raises :class:`PipelineError` if the target cannot be read or has no
    embedding where one is needed.
    """
    start = time.perf_counter()
    target = _read(target_path)
    if target is None:
        raise PipelineError(f"Could not read the target image from {target_path}")
    job = _Job(str(target_path), target, list(files), top_n, str(embeddings_file_path))
    task = _TASKS.get(task_number)
    scores = task(job) if task is not None else []
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    print(f"Execution time for task {task_number}: {elapsed_ms} milliseconds")
    return scores