import numpy as np
import pytest

from heightpatch.core.errors import ComputationError, ValidationError
from heightpatch.core.sampling import SamplingSpec, sample_control_grid
from heightpatch.core.surface import assemble_surface_descriptor, generate_surface_descriptor
from heightpatch.utils.bspline_helper import create_knot_vector, create_uniform_knot_vector


def test_generate_surface_descriptor_defaults():
    spec = SamplingSpec(6, 5, 10.0, 10.0)
    desc = generate_surface_descriptor(spec)
    assert desc.order == (3, 3)
    assert desc.periodic == (False, False)
    assert desc.degree == 3
    assert len(desc.weights) == 0 and not desc.is_rational
    assert (desc.nu, desc.nv) == (6, 5)
    assert len(desc.u_knots) == 6 + 4
    assert len(desc.v_knots) == 5 + 4
    np.testing.assert_allclose(desc.u_knots, create_knot_vector(6, 3))
    np.testing.assert_allclose(desc.v_knots, create_knot_vector(5, 3))
    # Default surface field is the cosine ripple
    assert desc.control_grid.point(0, 0)[2] == pytest.approx(0.3)


def test_flat_four_by_four_descriptor():
    desc = generate_surface_descriptor(SamplingSpec(4, 4, 10.0, 10.0), lambda x, y: 0.0)
    assert len(desc.control_grid) == 48
    assert np.all(desc.control_grid.points()[:, 2] == 0.0)
    assert len(desc.u_knots) == 8
    np.testing.assert_array_equal(desc.u_knots, [0, 0, 0, 0, 1, 1, 1, 1])


def test_uniform_knot_style_five_by_five_interior_knot():
    desc = generate_surface_descriptor(SamplingSpec(5, 5), "flat", knot_style="uniform")
    assert desc.u_knots[3] == pytest.approx(1.0 / 3.0)
    assert desc.v_knots[3] == pytest.approx(1.0 / 3.0)


def test_clamped_knot_style():
    desc = generate_surface_descriptor(SamplingSpec(6, 4), "flat", knot_style="clamped")
    np.testing.assert_allclose(desc.u_knots, create_knot_vector(6, 3))
    np.testing.assert_allclose(desc.v_knots, [0, 0, 0, 0, 1, 1, 1, 1])


def test_unknown_knot_style_rejected():
    with pytest.raises(ValidationError):
        generate_surface_descriptor(SamplingSpec(5, 5), "flat", knot_style="bezier")


@pytest.mark.parametrize("nu,nv", [(3, 5), (5, 2), (2, 2)])
def test_surface_needs_four_points_per_direction(nu, nv):
    with pytest.raises(ValidationError):
        generate_surface_descriptor(SamplingSpec(nu, nv), "flat")


def test_height_function_errors_propagate():
    def broken(x, y):
        raise OverflowError("boom")

    with pytest.raises(ComputationError):
        generate_surface_descriptor(SamplingSpec(4, 4), broken)


def test_descriptor_arrays_are_read_only():
    desc = generate_surface_descriptor(SamplingSpec(4, 4), "flat")
    for arr in (desc.u_knots, desc.v_knots, desc.weights, desc.control_grid.coordinates):
        assert not arr.flags.writeable


def _grid(nu=5, nv=4):
    return sample_control_grid(SamplingSpec(nu, nv), lambda x, y: x * y)


def test_assemble_rejects_knot_length_mismatch():
    grid = _grid()
    with pytest.raises(ValidationError, match="u knot vector"):
        assemble_surface_descriptor(grid, create_uniform_knot_vector(4), create_uniform_knot_vector(4))
    with pytest.raises(ValidationError, match="v knot vector"):
        assemble_surface_descriptor(grid, create_uniform_knot_vector(5), create_uniform_knot_vector(5))


def test_assemble_accepts_weights():
    grid = _grid()
    weights = np.full(20, 2.0)
    desc = assemble_surface_descriptor(grid, create_uniform_knot_vector(5), create_uniform_knot_vector(4),
                                       weights)
    assert desc.is_rational
    assert len(desc.weights) == 20


@pytest.mark.parametrize("weights", [np.ones(19), np.zeros(20), -np.ones(20)])
def test_assemble_rejects_bad_weights(weights):
    with pytest.raises(ValidationError):
        assemble_surface_descriptor(_grid(), create_uniform_knot_vector(5), create_uniform_knot_vector(4),
                                    weights)


def test_empty_weights_mean_unweighted():
    desc = assemble_surface_descriptor(_grid(), create_uniform_knot_vector(5), create_uniform_knot_vector(4), [])
    assert not desc.is_rational
