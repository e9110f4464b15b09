import os

import numpy as np
import pytest

from cbirkit.files import (
    extract_filename,
    read_embeddings,
    read_files,
    save_matched_images,
)
from cbirkit.imaging import load_image, save_image


def test_read_files_filters_extensions(tmp_path):
    for name in ["a.jpg", "b.png", "c.ppm", "d.tif", "e.txt", "f.jpeg", "g.JPG"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.jpg").mkdir()
    found = [os.path.basename(p) for p in read_files(tmp_path)]
    assert found == ["a.jpg", "b.png", "c.ppm", "d.tif"]


def test_read_files_returns_full_paths(tmp_path):
    (tmp_path / "x.png").write_bytes(b"")
    assert read_files(str(tmp_path)) == [str(tmp_path / "x.png")]


def test_read_files_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_files(tmp_path / "nope")


def test_read_embeddings_parses_lines(tmp_path):
    path = tmp_path / "emb.csv"
    path.write_text("pic.0001.jpg,0.5,-1.25,3\npic.0002.jpg,1,2,3\n")
    embeddings = read_embeddings(path)
    assert embeddings == {
        "pic.0001.jpg": [0.5, -1.25, 3.0],
        "pic.0002.jpg": [1.0, 2.0, 3.0],
    }


def test_read_embeddings_trailing_comma_and_duplicates(tmp_path):
    path = tmp_path / "emb.csv"
    path.write_text("a.jpg,1,2,\nb.jpg,\na.jpg,7\n")
    embeddings = read_embeddings(path)
    assert embeddings["a.jpg"] == [7.0]
    assert embeddings["b.jpg"] == []
    assert set(embeddings) == {"a.jpg", "b.jpg"}


def test_read_embeddings_windows_line_endings(tmp_path):
    path = tmp_path / "emb.csv"
    path.write_bytes(b"a.jpg,1.5,2.5\r\n")
    assert read_embeddings(path) == {"a.jpg": [1.5, 2.5]}


def test_read_embeddings_bad_value(tmp_path):
    path = tmp_path / "emb.csv"
    path.write_text("filename,feature\n")
    with pytest.raises(ValueError):
        read_embeddings(path)


def test_read_embeddings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_embeddings(tmp_path / "missing.csv")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("dir/sub/pic.0164.jpg", "pic.0164.jpg"),
        ("pic.0893.jpg", "pic.0893.jpg"),
        ("dir/", ""),
    ],
)
def test_extract_filename(path, expected):
    assert extract_filename(path) == expected


def test_save_matched_images_writes_top_n(tmp_path):
    sources = []
    for index in range(3):
        image = np.full((6, 8, 3), 40 * index, dtype=np.uint8)
        path = tmp_path / f"src{index}.png"
        save_image(path, image)
        sources.append((str(path), float(index)))
    target = np.zeros((5, 5, 3), dtype=np.uint8)
    results = tmp_path / "results"

    written = save_matched_images(target, sources, results, 2, 7)

    assert [os.path.basename(p) for p in written] == [
        "target_task_7.jpg",
        "match_task_7_1.jpg",
        "match_task_7_2.jpg",
    ]
    assert not (results / "match_task_7_3.jpg").exists()
    assert load_image(results / "target_task_7.jpg").shape == (5, 5, 3)
    assert load_image(results / "match_task_7_2.jpg").shape == (6, 8, 3)


def test_save_matched_images_fewer_scores_than_top_n(tmp_path):
    path = tmp_path / "only.png"
    save_image(path, np.zeros((4, 4, 3), dtype=np.uint8))
    written = save_matched_images(
        np.zeros((4, 4, 3), dtype=np.uint8), [(str(path), 0.0)], tmp_path / "out", 5, 1
    )
    assert len(written) == 2
    assert all(os.path.exists(p) for p in written)