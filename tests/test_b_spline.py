import logging
import numpy as np
import pytest
import matplotlib.pyplot as plt
from scipy.interpolate import BSpline as ScipyBSpline
from polyspline.exceptions import BasisCountMismatchError, InvalidDegreeError, KnotCountMismatchError
from polyspline.b_spline import (BSpline, build_b_spline, build_basis, step_basis, step_b_spline, 
                                 uniform_knot_vector, uniform_b_spline, uniform_step_b_spline)
from polyspline.spline import FlattenerSpline, Spline
from polyspline.vector import Vector

KNOT_VECTORS = {
    "clamped": [0., 0., 0., 0., 0.3, 0.7, 1., 1., 1., 1.], 
    "uniform": list(np.linspace(0, 1, 10)), 
    "repeated": [0., 0., 0., 0., 0.3, 0.5, 0.5, 1., 1., 1., 1.], 
}

def domain_points(knot, degree, n=37):
    """Points of [knot[degree], knot[m - degree - 1]) including the knots themselves."""
    lower, upper = knot[degree], knot[len(knot) - degree - 1]
    inner = [k for k in knot if lower <= k < upper]
    return np.unique(np.concatenate((np.linspace(lower, upper, n, endpoint=False), inner)))

def test_uniform_knot_vector():
    np.testing.assert_allclose(uniform_knot_vector(5), [0., 0.25, 0.5, 0.75, 1.])
    with pytest.raises(ValueError):
        uniform_knot_vector(1)

def test_step_basis():
    """Two step functions on [0, 0.5) and [0.5, 1] for the knot vector [0, 0.5, 1]."""
    basis = step_basis([0., 0.5, 1.])
    assert len(basis)==2
    assert [b.evaluate(0.25) for b in basis]==[1., 0.]
    assert [b.evaluate(0.5) for b in basis]==[0., 1.]
    assert [b.evaluate(1.) for b in basis]==[0., 1.]
    assert not basis[0].support_range.is_inclusive_upper and basis[1].support_range.is_inclusive_upper
    assert Spline(basis).evaluate(0.25)==1.

def test_step_partition_of_unity():
    knot = [0., 0., 0.2, 0.5, 0.5, 1., 1.]
    spline = Spline(step_basis(knot))
    for x in np.linspace(0, 1, 21):
        assert spline.evaluate(x)==1.

def test_step_repeated_knot():
    """A repeated knot holds an empty step function, so each knot value is counted once."""
    basis = step_basis([0., 0., 0.2, 0.5, 0.5, 1., 1.])
    assert [b.evaluate(0.5) for b in basis]==[0., 0., 0., 0., 1., 0.]
    assert [b.evaluate(0.) for b in basis]==[0., 1., 0., 0., 0., 0.]
    assert not basis[3].support_range.is_in(0.5) and not basis[5].support_range.is_in(1.)
    spline = build_b_spline([0., 0.5, 0.5, 1.], [1., 2., 4.], 0)
    assert [spline.evaluate(x) for x in (0.25, 0.5, 1.)]==[1., 4., 4.]
    XI = np.array([0., 0.25, 0.5, 0.75, 1.])
    np.testing.assert_allclose(spline.basis_matrix(XI) @ np.array([1., 2., 4.]), spline.evaluate_many(XI))

@pytest.mark.parametrize("name", list(KNOT_VECTORS))
@pytest.mark.parametrize("degree", [1, 2, 3])
def test_partition_of_unity(name, degree):
    knot = KNOT_VECTORS[name]
    basis = build_basis(knot, degree)
    assert len(basis)==len(knot) - degree - 1
    unflattened = Spline(basis)
    flattened = FlattenerSpline.flatten(unflattened)
    for x in domain_points(knot, degree):
        assert abs(unflattened.evaluate(x) - 1.) < 1e-9
        assert abs(flattened.evaluate(x) - 1.) < 1e-9

@pytest.mark.parametrize("degree", [1, 2, 3])
def test_local_support(degree):
    knot = KNOT_VECTORS["clamped"]
    for i, basis_function in enumerate(build_basis(knot, degree)):
        lower, upper = knot[i], knot[i + degree + 1]
        for x in np.linspace(-0.5, 1.5, 41):
            if x < lower or x > upper:
                assert basis_function.evaluate(x)==0

@pytest.mark.parametrize("degree", [1, 2, 3])
def test_recursive_degree_consistency(degree):
    """A degree d spline is the Cox-de Boor blend of the degree d - 1 basis functions."""
    knot = KNOT_VECTORS["repeated"]
    n = len(knot) - degree - 1
    control_points = np.random.default_rng(degree).uniform(-1, 1, size=n)
    spline = build_b_spline(knot, control_points, degree)
    lower_basis = build_basis(knot, degree - 1)
    for x in domain_points(knot, degree):
        expected = 0.
        for i in range(n):
            left_span = knot[i + degree] - knot[i]
            right_span = knot[i + degree + 1] - knot[i + 1]
            blend = 0.
            if left_span!=0:
                blend += (x - knot[i])/left_span*lower_basis[i].evaluate(x)
            if right_span!=0:
                blend += (knot[i + degree + 1] - x)/right_span*lower_basis[i + 1].evaluate(x)
            expected += control_points[i]*blend
        assert np.isclose(spline.evaluate(x), expected, atol=1e-9)

@pytest.mark.parametrize("name", list(KNOT_VECTORS))
@pytest.mark.parametrize("degree", [1, 2, 3])
def test_flatten_equivalence(name, degree):
    knot = KNOT_VECTORS[name]
    n = len(knot) - degree - 1
    control_points = np.random.default_rng(0).uniform(-1, 1, size=(n, 2))
    flattened = build_b_spline(knot, control_points, degree)
    unflattened = build_b_spline(knot, control_points, degree, flatten=False)
    twice = FlattenerSpline.flatten(flattened)
    assert all(isinstance(b, Spline) for b in unflattened.basis)
    for x in domain_points(knot, degree):
        np.testing.assert_allclose(np.asarray(flattened.evaluate(x)), np.asarray(unflattened.evaluate(x)), atol=1e-9)
        np.testing.assert_allclose(np.asarray(twice.evaluate(x)), np.asarray(flattened.evaluate(x)), atol=1e-9)

@pytest.mark.parametrize("name", list(KNOT_VECTORS))
@pytest.mark.parametrize("degree", [0, 1, 2, 3])
def test_against_scipy(name, degree):
    knot = np.array(KNOT_VECTORS[name])
    n = knot.size - degree - 1
    control_points = np.random.default_rng(1).uniform(-1, 1, size=n)
    spline = build_b_spline(knot, control_points, degree)
    reference = ScipyBSpline(knot, control_points, degree, extrapolate=False)
    XI = spline.linspace(7)
    np.testing.assert_allclose(spline.evaluate_many(XI), reference(XI), atol=1e-9)

def test_uniform_quadratic():
    """Quadratic spline of 4 control points on a uniform knot vector."""
    control_points = [2., 1., 1., 3.]
    spline = uniform_b_spline(control_points, 2)
    knot = uniform_knot_vector(7)
    assert isinstance(spline, BSpline) and spline.order==3 and spline.degree==2
    np.testing.assert_allclose(spline.knot_vector, knot)
    assert spline.control_points==tuple(control_points)
    domain = spline.valid_domain
    assert (    domain.lower_boundary==knot[2] 
            and domain.upper_boundary==knot[4] 
            and domain.is_inclusive_lower 
            and not domain.is_inclusive_upper)
    middle = (domain.lower_boundary + domain.upper_boundary)/2
    value = spline.evaluate(middle)
    blend = sum(c*b.evaluate(middle) for c, b in zip(control_points, build_basis(knot, 2)))
    assert np.isfinite(value) and np.isclose(value, blend) and np.isclose(value, 1.)

def test_invalid_degree():
    with pytest.raises(InvalidDegreeError):
        build_b_spline(uniform_knot_vector(7), [1., 2., 3.], 3)
    with pytest.raises(InvalidDegreeError):
        build_b_spline(uniform_knot_vector(4), [1., 2., 3.], -1)
    with pytest.raises(InvalidDegreeError):
        uniform_b_spline([1., 2.], 2)

def test_knot_count_mismatch():
    with pytest.raises(KnotCountMismatchError):
        step_b_spline([0., 0.5, 1.], [1., 2., 3.])
    with pytest.raises(KnotCountMismatchError):
        build_b_spline([0., 0.5, 1.], [1., 2., 3.], 0)

def test_basis_count_mismatch():
    with pytest.raises(BasisCountMismatchError):
        build_b_spline([0., 0.25, 0.5, 0.75, 1.], [1., 2., 3.], 2)

def test_step_b_spline():
    spline = uniform_step_b_spline([1., 2., 3.])
    assert spline.order==1 and spline.valid_domain.upper_boundary==1.
    assert [spline.evaluate(x) for x in (0.1, 0.5, 0.9, 1.)]==[1., 2., 3., 3.]
    assert build_b_spline([0., 1., 2.], [Vector(1., 0.), Vector(0., 1.)], 0).evaluate(1.5)==Vector(0., 1.)

def test_clamped_curve_end_points():
    control_points = [[0., 0.], [1., 2.], [3., 2.], [4., 0.]]
    spline = build_b_spline([0., 0., 0., 0., 1., 1., 1., 1.], control_points, 3)
    assert spline.dimensions==2
    np.testing.assert_allclose(np.asarray(spline.evaluate(0.)), control_points[0])
    np.testing.assert_allclose(np.asarray(spline.evaluate(1.)), control_points[-1])
    np.testing.assert_allclose(np.asarray(spline.evaluate(0.5)), [2., 1.5])

def test_knot_vector_is_read_only():
    spline = uniform_b_spline([1., 2., 3.], 1)
    with pytest.raises(ValueError):
        spline.knot_vector[0] = 1.

def test_linspace():
    spline = build_b_spline(KNOT_VECTORS["repeated"], np.ones(7), 3)
    XI = spline.linspace(5)
    assert XI.size==5*3 and XI[0]==0. and np.all(XI < 1.) and np.all(np.diff(XI) > 0)

def test_basis_matrix():
    knot = KNOT_VECTORS["clamped"]
    control_points = np.random.default_rng(2).uniform(-1, 1, size=6)
    spline = build_b_spline(knot, control_points, 3)
    XI = spline.linspace(9)
    N = spline.basis_matrix(XI)
    assert N.shape==(XI.size, 6)
    np.testing.assert_allclose(N @ control_points, spline.evaluate_many(XI), atol=1e-9)
    np.testing.assert_allclose(np.asarray(N.sum(axis=1)).ravel(), 1.)

def test_evaluate_many_shape():
    spline = uniform_b_spline(np.random.default_rng(3).uniform(size=(5, 3)), 2)
    assert spline.evaluate_many(np.linspace(0.4, 0.6, 4)).shape==(4, 3)

def test_build_logs(caplog):
    with caplog.at_level(logging.DEBUG, logger="polyspline.b_spline"):
        uniform_b_spline([1., 2., 3., 4.], 2)
    messages = [record.getMessage() for record in caplog.records]
    assert "Built 5 basis functions of order 2" in messages
    assert any(message.startswith("Flattened B-spline") for message in messages)

def test_plot():
    uniform_b_spline([2., 1., 1., 3.], 2).plot_basis(show=False)
    uniform_b_spline([2., 1., 1., 3.], 2).plot(show=False)
    uniform_b_spline([[0., 0.], [1., 1.], [2., 0.]], 1).plot(show=False)
    with pytest.raises(ValueError):
        uniform_b_spline([[0., 0., 0.], [1., 1., 1.]], 1).plot(show=False)
    plt.close("all")
