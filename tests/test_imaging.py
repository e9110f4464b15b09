import numpy as np
import pytest

from cbirkit.imaging import (
    bgr_to_gray,
    bgr_to_hsv,
    load_image,
    normalize_minmax,
    resize,
    save_image,
)


def _random_bgr(seed=0, shape=(12, 9, 3)):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=shape, dtype=np.uint8)


def test_gray_of_neutral_pixels_keeps_value():
    values = np.arange(0, 256, dtype=np.uint8)
    image = np.repeat(values[None, :, None], 3, axis=2)
    gray = bgr_to_gray(image)
    assert gray.shape == (1, 256)
    assert np.array_equal(gray[0], values)


def test_gray_is_monotonic_in_brightness():
    dark = np.full((2, 2, 3), 40, dtype=np.uint8)
    bright = dark.copy()
    bright[..., 1] = 200
    gray_dark = bgr_to_gray(dark)
    gray_bright = bgr_to_gray(bright)
    assert gray_dark.tolist() == [[40, 40], [40, 40]]
    assert int(gray_bright.min()) > 40


def test_gray_of_gray_image_is_copy():
    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    result = bgr_to_gray(gray)
    assert np.array_equal(result, gray)
    result[0, 0] = 99
    assert gray[0, 0] == 0


def test_hsv_of_primaries():
    image = np.array([[[0, 0, 255], [0, 255, 0], [255, 0, 0]]], dtype=np.uint8)
    hsv = bgr_to_hsv(image)
    assert hsv[0, 0].tolist() == [0, 255, 255]
    assert hsv[0, 1, 0] == 60
    assert hsv[0, 2, 0] == 120
    assert np.all(hsv[0, :, 1] == 255)


def test_hsv_of_neutral_pixels_has_no_saturation():
    image = np.full((3, 3, 3), 77, dtype=np.uint8)
    hsv = bgr_to_hsv(image)
    assert hsv.reshape(-1, 3).tolist() == [[0, 0, 77]] * 9


def test_hsv_hue_stays_in_range():
    hsv = bgr_to_hsv(_random_bgr(3, (30, 30, 3)))
    assert hsv[..., 0].max() < 180
    assert hsv.dtype == np.uint8


def test_hsv_rejects_gray_input():
    with pytest.raises(ValueError):
        bgr_to_hsv(np.zeros((4, 4), dtype=np.uint8))


def test_resize_constant_image_stays_constant():
    image = np.full((10, 20, 3), 123, dtype=np.uint8)
    out = resize(image, 7, 5)
    assert out.shape == (5, 7, 3)
    assert out.dtype == np.uint8
    assert np.all(out == 123)


def test_resize_to_same_size_is_identity():
    image = _random_bgr(1)
    out = resize(image, image.shape[1], image.shape[0])
    assert np.array_equal(out, image)


def test_resize_float_keeps_range_and_dtype():
    image = np.random.default_rng(2).random((8, 8)).astype(np.float32)
    out = resize(image, 16, 16)
    assert out.dtype == np.float32
    assert out.min() >= image.min() - 1e-6
    assert out.max() <= image.max() + 1e-6


def test_resize_rejects_non_positive_size():
    with pytest.raises(ValueError):
        resize(np.zeros((4, 4), dtype=np.uint8), 0, 4)


def test_normalize_maps_extremes():
    data = np.array([[3.0, 8.0], [5.0, -2.0]])
    out = normalize_minmax(data, 0.0, 1.0)
    assert out.dtype == np.float32
    assert out.min() == pytest.approx(0.0)
    assert out.max() == pytest.approx(1.0)
    assert np.argmax(out) == np.argmax(data)


def test_normalize_custom_range():
    data = np.linspace(-4, 9, 20)
    out = normalize_minmax(data, 0, 255)
    assert out.min() == pytest.approx(0.0)
    assert out.max() == pytest.approx(255.0)
    assert np.all(np.diff(out) > 0)


def test_normalize_constant_maps_to_low():
    out = normalize_minmax(np.full((3, 3), 5.0), 0.25, 1.0)
    assert np.allclose(out, 0.25)


def test_save_and_load_round_trip(tmp_path):
    image = _random_bgr(4)
    path = tmp_path / "img.png"
    save_image(path, image)
    assert np.array_equal(load_image(path), image)


def test_channel_order_survives_round_trip(tmp_path):
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    image[..., 0] = 255
    path = tmp_path / "blue.png"
    save_image(str(path), image)
    loaded = load_image(str(path))
    assert loaded.reshape(-1, 3).tolist() == [[255, 0, 0]] * 16


def test_grayscale_load_matches_conversion(tmp_path):
    image = _random_bgr(5)
    path = tmp_path / "img.png"
    save_image(path, image)
    assert np.array_equal(load_image(path, grayscale=True), bgr_to_gray(image))


def test_save_gray_round_trip(tmp_path):
    gray = np.arange(64, dtype=np.uint8).reshape(8, 8)
    path = tmp_path / "gray.png"
    save_image(path, gray)
    assert np.array_equal(load_image(path, grayscale=True), gray)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_image(tmp_path / "missing.png")


def test_load_non_image_raises(tmp_path):
    path = tmp_path / "bad.jpg"
    path.write_text("not an image")
    with pytest.raises(OSError):
        load_image(path)