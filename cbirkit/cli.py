"""Command line entry point: rank a folder of images against a task's target image."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional, Sequence

from .files import read_files, save_matched_images
from .imaging import load_image
from .pipeline import PipelineError, pipeline

TARGET_IMAGES = {
    1: "pic.1016.jpg",
    2: "pic.0164.jpg",
    21: "pic.0164.jpg",
    3: "pic.0164.jpg",
    31: "pic.1016.jpg",
    32: "pic.1016.jpg",
    4: "pic.0535.jpg",
    41: "pic.0628.jpg",
    42: "pic.0746.jpg",
    5: "pic.0893.jpg",
    51: "pic.0164.jpg",
    6: "pic.1072.jpg",
    7: "pic.0746.jpg",
    8: "pic.0164.jpg",
    9: "pic.0280.jpg",
}


def target_image_for_task(directory: str, task_number: int) -> str:
    """Path of the target image used by ``task_number`` inside ``directory``."""
    try:
        name = TARGET_IMAGES[task_number]
    except KeyError:
        raise ValueError(f"invalid task number {task_number}") from None
    return os.path.join(directory, name)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbirkit", description="Rank images by similarity to a task's target image."
    )
    parser.add_argument("directory", help="folder holding the image database")
    parser.add_argument("top_n", type=int, help="number of matches to show and save")
    parser.add_argument("task_number", type=int, help="feature task to run")
    parser.add_argument("embeddings", help="CSV file of image embeddings")
    parser.add_argument("--results", default="results", help="folder for saved matches")
    parser.add_argument(
        "--target-dir", default=None, help="folder of target images (default: directory)"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one task and print and save its top matches; returns the exit status."""
    args = _parser().parse_args(argv)

    try:
        target_path = target_image_for_task(args.target_dir or args.directory, args.task_number)
    except ValueError:
        print("Invalid task number.", file=sys.stderr)
        return 1

    try:
        image_files = read_files(args.directory)
    except OSError as exc:
        print(f"Filesystem error: {exc}", file=sys.stderr)
        image_files = []

    try:
        scores = pipeline(
            target_path, image_files, args.top_n, args.task_number, args.embeddings
        )
    except PipelineError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"Top {args.top_n} matches for task {args.task_number}:")
    for path, score in scores[: max(args.top_n, 0)]:
        print(f"{path} - Score: {score:g}")

    save_matched_images(
        load_image(target_path), scores, args.results, args.top_n, args.task_number
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())