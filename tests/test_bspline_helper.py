import numpy as np
import pytest

from heightpatch.core.errors import ValidationError
from heightpatch.utils.bspline_helper import (
    create_knot_vector,
    create_uniform_knot_vector,
    knot_vector_for_style,
    validate_knot_vector,
)


@pytest.mark.parametrize("n", [4, 5, 6, 10, 100])
def test_uniform_knot_vector_shape_and_clamps(n):
    knots = create_uniform_knot_vector(n)
    assert len(knots) == n + 4
    assert np.all(knots[:3] == 0.0)
    assert np.all(knots[-3:] == 1.0)
    interior = knots[3:n]
    assert np.all(np.diff(interior) > 0.0)
    assert np.all((interior > 0.0) & (interior < 1.0))


def test_uniform_knot_vector_interior_values():
    knots = create_uniform_knot_vector(5)
    assert knots[3] == pytest.approx(1.0 / 3.0)
    assert knots[4] == pytest.approx(2.0 / 3.0)
    np.testing.assert_allclose(knots, [0, 0, 0, 1 / 3, 2 / 3, 1, 1, 1, 1])


def test_uniform_knot_vector_minimum_count():
    knots = create_uniform_knot_vector(4)
    assert len(knots) == 8
    np.testing.assert_allclose(knots, [0, 0, 0, 0.5, 1, 1, 1, 1])


@pytest.mark.parametrize("n", [0, 1, 3])
def test_uniform_knot_vector_rejects_small_counts(n):
    with pytest.raises(ValidationError):
        create_uniform_knot_vector(n)


def test_knot_vector_rejects_non_integer_count():
    with pytest.raises(ValidationError):
        create_uniform_knot_vector(5.0)
    with pytest.raises(ValidationError):
        create_knot_vector(True, 0)


def test_clamped_knot_vector():
    np.testing.assert_allclose(create_knot_vector(4, 3), [0, 0, 0, 0, 1, 1, 1, 1])
    np.testing.assert_allclose(create_knot_vector(6, 3), [0, 0, 0, 0, 1 / 3, 2 / 3, 1, 1, 1, 1])


def test_knot_vector_for_style():
    np.testing.assert_allclose(knot_vector_for_style(6, "uniform"), create_uniform_knot_vector(6))
    np.testing.assert_allclose(knot_vector_for_style(6, "clamped"), create_knot_vector(6, 3))
    np.testing.assert_allclose(knot_vector_for_style(6), create_knot_vector(6, 3))
    with pytest.raises(ValidationError):
        knot_vector_for_style(6, "periodic")


def test_validate_knot_vector_accepts_both_styles():
    for n in (4, 7):
        validate_knot_vector(create_uniform_knot_vector(n), n)
        validate_knot_vector(create_knot_vector(n, 3), n)


def test_validate_knot_vector_rejects_wrong_length():
    with pytest.raises(ValidationError, match="expected 9"):
        validate_knot_vector(create_uniform_knot_vector(6), 5)


def test_validate_knot_vector_rejects_decreasing():
    knots = create_uniform_knot_vector(6)
    knots[3], knots[4] = knots[4], knots[3]
    with pytest.raises(ValidationError):
        validate_knot_vector(knots, 6)


def test_validate_knot_vector_rejects_missing_clamp():
    knots = create_uniform_knot_vector(6)
    knots[0] = 0.01
    with pytest.raises(ValidationError):
        validate_knot_vector(np.sort(knots), 6)

