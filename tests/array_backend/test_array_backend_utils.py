# tests/array_backend/test_array_backend_utils.py
import numpy as np
import pytest

from gridbayes.array_backend import utils as U


def test_ensure_real_scalar_from_python_scalar():
    assert U._ensure_real_scalar(3) == 3.0
    assert U._ensure_real_scalar(3.5) == 3.5
    assert isinstance(U._ensure_real_scalar(3), float)


def test_ensure_real_scalar_from_numpy_scalar_and_0d():
    assert isinstance(U._ensure_real_scalar(np.float32(2.0)), float)
    assert U._ensure_real_scalar(np.array(4.0)) == 4.0
    assert U._ensure_real_scalar(np.array([[4.0]])) == 4.0


@pytest.mark.parametrize(
    "non_scalar_input",
    [[1, 2], np.arange(2), np.identity(2)]
)
def test_ensure_real_scalar_rejects_multiple_elements(non_scalar_input):
    with pytest.raises(ValueError):
        U._ensure_real_scalar(non_scalar_input)


def test_ensure_real_scalar_rejects_complex():
    with pytest.raises(ValueError):
        U._ensure_real_scalar(1 + 2j)
    with pytest.raises(ValueError):
        U._ensure_real_scalar(np.array(1 + 0j))


@pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf])
def test_ensure_real_scalar_finite_flag(value):
    U._ensure_real_scalar(value)
    with pytest.raises(ValueError):
        U._ensure_real_scalar(value, finite=True)


def test_is_integral_excludes_bool_and_floats():
    assert U._is_integral(3)
    assert U._is_integral(np.int64(3))
    assert not U._is_integral(True)
    assert not U._is_integral(np.bool_(True))
    assert not U._is_integral(3.0)
    assert not U._is_integral("3")


def test_ensure_vector_scalar_and_1d_and_2d():
    assert U._ensure_vector(5).shape == (1,)
    assert U._ensure_vector([1, 2, 3]).shape == (3,)
    assert U._ensure_vector(np.array([[1, 2, 3]]), length=3).shape == (3,)
    assert U._ensure_vector(np.array([[1], [2]])).shape == (2,)


def test_ensure_vector_length_check_and_bad_shapes():
    with pytest.raises(ValueError):
        U._ensure_vector([1, 2, 3], length=2)
    with pytest.raises(ValueError):
        U._ensure_vector(np.ones((2, 2)))
    with pytest.raises(ValueError):
        U._ensure_vector(np.ones((2, 1, 1)))


def test_ensure_vector_copy_semantics():
    x = np.arange(3.0)
    assert U._ensure_vector(x) is not x
    assert U._ensure_vector(x, copy=False) is x


def test_ensure_finite_vector_rejects_nan():
    with pytest.raises(ValueError):
        U._ensure_finite_vector([1.0, np.nan])
    np.testing.assert_array_equal(U._ensure_finite_vector([1.0, 2.0]), [1.0, 2.0])


def test_ensure_batch_vector_shapes():
    assert U._ensure_batch_vector(2.0).shape == (1, 1)
    assert U._ensure_batch_vector([1.0, 2.0, 3.0]).shape == (3, 1)
    assert U._ensure_batch_vector(np.ones((4, 2)), length=2).shape == (4, 2)
    assert U._ensure_batch_vector([]).shape == (0, 1)
    with pytest.raises(ValueError):
        U._ensure_batch_vector(np.ones((4, 2)), length=3)
    with pytest.raises(ValueError):
        U._ensure_batch_vector(np.ones((2, 2, 2)))


def test_broadcast_to_size():
    np.testing.assert_array_equal(U._broadcast_to_size(1.0, 3), [1.0, 1.0, 1.0])
    np.testing.assert_array_equal(U._broadcast_to_size([[1.0], [2.0]], 2), [1.0, 2.0])
    with pytest.raises(ValueError):
        U._broadcast_to_size([1.0, 2.0], 3)


def test_readonly():
    x = U._readonly(np.zeros(2))
    with pytest.raises(ValueError):
        x[0] = 1.0
