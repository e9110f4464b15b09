"""Image directory listing, result saving and embedding file reading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np

from .imaging import PathType, load_image, save_image

IMAGE_EXTENSIONS = frozenset({".jpg", ".png", ".ppm", ".tif"})


def read_files(dirname: PathType) -> list[str]:
    """Return the paths of the image files directly inside ``dirname``, sorted.

    Only regular files ending in .jpg, .png, .ppm or .tif are listed.
    Raises ``OSError`` if the directory cannot be read.
    """
    return sorted(
        str(entry)
        for entry in Path(dirname).iterdir()
        if entry.is_file() and entry.suffix in IMAGE_EXTENSIONS
    )


def save_matched_images(
    target_image: np.ndarray,
    scores: Sequence[Tuple[str, float]],
    results_directory: PathType,
    top_n: int,
    task_number: int,
) -> list[str]:
    """Write the target image and the first ``top_n`` scored images to a results folder.

    Files are named ``target_task_<task>.jpg`` and ``match_task_<task>_<rank>.jpg``.
    Returns the paths written, target first.
    """
    results = Path(results_directory)
    results.mkdir(exist_ok=True)

    target_path = results / f"target_task_{task_number}.jpg"
    save_image(target_path, target_image)
    written = [str(target_path)]

    for rank, (image_path, _score) in enumerate(scores[: max(top_n, 0)], start=1):
        match_path = results / f"match_task_{task_number}_{rank}.jpg"
        save_image(match_path, load_image(image_path))
        written.append(str(match_path))
    return written


def read_embeddings(file_path: PathType) -> dict[str, list[float]]:
    """Read ``filename,value,value,...`` lines into a mapping of filename to vector.

    A later line for the same filename replaces an earlier one. A value that
    is not a number raises ``ValueError``.
    """
    embeddings: dict[str, list[float]] = {}
    with open(file_path, encoding="utf-8") as handle:
        for line in handle:
            fields = line.rstrip("\n").split(",")
            if len(fields) > 1 and fields[-1] == "":
                fields.pop()
            name, *values = fields
            embeddings[name] = [float(value) for value in values]
    return embeddings


def extract_filename(filepath: PathType) -> str:
    """Return the final component of a path."""
    return os.path.basename(os.fspath(filepath))