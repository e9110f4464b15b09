import numpy as np
import pytest

from cbirkit.distances import (
    cosine_distance,
    histogram_intersection,
    histogram_intersection_3d,
    ssd,
)


def _image(seed, shape=(20, 24, 3)):
    return np.random.default_rng(seed).integers(0, 256, size=shape, dtype=np.uint8)


def test_ssd_of_image_with_itself_is_zero():
    image = _image(0)
    assert ssd(image, image) == 0.0


def test_ssd_is_symmetric_and_positive():
    a, b = _image(1), _image(2)
    assert ssd(a, b) == ssd(b, a)
    assert ssd(a, b) > 0


def test_ssd_ignores_pixels_outside_centre():
    a = _image(3)
    b = a.copy()
    b[0, 0] = 255 - b[0, 0]
    b[-1, -1] = 255 - b[-1, -1]
    assert ssd(a, b) == 0.0


def test_ssd_counts_centre_difference():
    a = np.zeros((9, 9, 3), dtype=np.uint8)
    b = a.copy()
    b[4, 4, 1] = 10
    assert ssd(a, b) == 100.0


def test_ssd_rejects_small_images():
    small = np.zeros((5, 5, 3), dtype=np.uint8)
    with pytest.raises(ValueError):
        ssd(small, small)


def test_ssd_rejects_gray_images():
    gray = np.zeros((10, 10), dtype=np.uint8)
    with pytest.raises(ValueError):
        ssd(gray, gray)


def test_intersection_with_itself_is_total_mass():
    hist = np.random.default_rng(4).random((16, 16)).astype(np.float32)
    assert histogram_intersection(hist, hist) == pytest.approx(float(hist.sum(dtype=np.float64)))


def test_intersection_symmetric_and_bounded():
    rng = np.random.default_rng(5)
    a, b = rng.random((8, 8)), rng.random((8, 8))
    value = histogram_intersection(a, b)
    assert value == pytest.approx(histogram_intersection(b, a))
    assert value <= min(a.sum(), b.sum()) + 1e-9


def test_intersection_shape_mismatch():
    with pytest.raises(ValueError):
        histogram_intersection(np.zeros((8, 8)), np.zeros((8, 4)))


def test_intersection_3d_with_itself_and_bounds():
    rng = np.random.default_rng(6)
    a, b = rng.random((8, 8, 8)), rng.random((8, 8, 8))
    assert histogram_intersection_3d(a, a) == pytest.approx(a.sum())
    assert histogram_intersection_3d(a, b) <= min(a.sum(), b.sum()) + 1e-9


def test_intersection_3d_rejects_mismatch():
    with pytest.raises(ValueError):
        histogram_intersection_3d(np.zeros((8, 8, 8)), np.zeros((4, 4, 4)))
    with pytest.raises(ValueError):
        histogram_intersection_3d(np.zeros((8, 8)), np.zeros((8, 8)))


def test_cosine_distance_with_itself_is_zero():
    v = [0.3, -1.2, 4.0, 2.5]
    assert cosine_distance(v, v) == pytest.approx(0.0, abs=1e-12)


def test_cosine_distance_is_scale_invariant():
    v = np.array([1.0, 2.0, -3.0])
    w = np.array([0.5, -1.0, 2.0])
    assert cosine_distance(v, w) == pytest.approx(cosine_distance(5 * v, 0.1 * w))


def test_cosine_distance_extremes():
    assert cosine_distance([1.0, 0.0], [0.0, 3.0]) == pytest.approx(1.0)
    assert cosine_distance([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(2.0)


def test_cosine_distance_flattens_arrays():
    a = np.arange(1, 7, dtype=np.float32).reshape(2, 3)
    assert cosine_distance(a, a.ravel()) == pytest.approx(0.0, abs=1e-7)


def test_cosine_distance_zero_vector_is_nan():
    result = cosine_distance([0.0, 0.0], [1.0, 2.0])
    assert str(float(result)) == "nan"


def test_cosine_distance_length_mismatch():
    with pytest.raises(ValueError):
        cosine_distance([1.0, 2.0], [1.0, 2.0, 3.0])