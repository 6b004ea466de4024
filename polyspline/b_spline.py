import logging
from typing import Iterable, Union

import numpy as np
import scipy.sparse as sps
import matplotlib.pyplot as plt

from polyspline.exceptions import (
    BasisCountMismatchError,
    InvalidDegreeError,
    KnotCountMismatchError,
)
from polyspline.polynomial import Polynomial, linear_polynomial
from polyspline.ranges import SimpleRange
from polyspline.spline import (
    BasisPolynomial,
    Combiner,
    Evaluable,
    FlattenerSpline,
    Spline,
    linear_combiner,
)
from polyspline.vector import Operand, as_operand, operand_dimens, stack

logger = logging.getLogger(__name__)

CONSTANT_ONE = Polynomial([1])

ControlPoints = Iterable[Union[float, Iterable[float]]]


class BSpline(Spline):
    """
    Spline built from a knot vector and control points by the Cox-de Boor recursion.

    A `BSpline` is an ordinary `Spline` (its `basis` holds the basis terms already
    scaled by the control points) that remembers how it was built. It is never modified
    after construction: build a new one when the knot vector, the control points or the
    degree change.

    Attributes
    ----------
    control_points : tuple[Operand, ...]
        Control points weighting the basis functions, numbers or `Vector`s.
    knot_vector : np.ndarray[np.floating]
        Read-only, non decreasing knot vector.
    order : int
        Order of the spline, i.e. its degree + 1.
    valid_domain : SimpleRange
        Parameter range `[knot[order - 1], knot[len(control_points)])` over which
        the basis functions partition unity and the curve is meaningful.

    See Also
    --------
    `build_b_spline` : Builder of `BSpline` instances.
    """

    control_points: tuple[Operand, ...]
    knot_vector: np.ndarray[np.floating]
    order: int
    valid_domain: SimpleRange

    def __init__(
        self,
        basis: Iterable[Evaluable],
        control_points: Iterable[Operand],
        knot_vector: np.ndarray[np.floating],
        order: int,
        combiner: Combiner = linear_combiner,
    ):
        super().__init__(basis, combiner)
        self.control_points = tuple(control_points)
        self.knot_vector = knot_vector
        self.order = order
        self.valid_domain = SimpleRange(
            float(knot_vector[order - 1]),
            float(knot_vector[len(self.control_points)]),
            True,
            False,
        )

    @property
    def degree(self) -> int:
        return self.order - 1

    @property
    def dimensions(self) -> int:
        """Number of components of an evaluation, `1` for scalar splines."""
        return operand_dimens(*self.control_points)

    def evaluate_many(self, XI: Iterable[float]) -> np.ndarray[np.floating]:
        """
        Evaluate the spline at several parameters.

        Parameters
        ----------
        XI : Iterable[float]
            Parameters at which the spline is evaluated.

        Returns
        -------
        values : np.ndarray[np.floating]
            Array of shape (`XI.size`,) for scalar splines and
            (`XI.size`, `dimensions`) for vector valued ones.
        """
        return stack(
            (self.evaluate(xi) for xi in np.asarray(XI, dtype="float").ravel()),
            self.dimensions,
        )

    def linspace(self, n_eval_per_span: int = 10) -> np.ndarray[np.floating]:
        """
        Generate evenly spaced parameters over the valid domain.

        Points are spread uniformly within each knot span, so the spacing may differ
        from one span to another. The upper boundary of the valid domain is excluded.

        Parameters
        ----------
        n_eval_per_span : int, optional
            Number of parameters per knot span. By default, 10.

        Returns
        -------
        xi : np.ndarray[np.floating]
            Parameters in the valid domain.

        Examples
        --------
        >>> spline = uniform_b_spline([2., 1., 1., 3.], 2)
        >>> spline.linspace(2)
        array([0.33333333, 0.41666667, 0.5       , 0.58333333])
        """
        lower = self.valid_domain.lower_boundary
        upper = self.valid_domain.upper_boundary
        knot_uniq = np.unique(
            self.knot_vector[
                np.logical_and(self.knot_vector >= lower, self.knot_vector <= upper)
            ]
        )
        if knot_uniq.size < 2:
            return np.empty(0, dtype="float")
        return np.hstack(
            [
                np.linspace(a, b, n_eval_per_span, endpoint=False)
                for a, b in zip(knot_uniq[:-1], knot_uniq[1:])
            ]
        )

    def basis_matrix(self, XI: Iterable[float]) -> sps.coo_matrix:
        """
        Values of the unscaled basis functions at several parameters.

        The basis functions are rebuilt from the knot vector and flattened one by one
        before being evaluated.

        Returns
        -------
        N : sps.coo_matrix
            Sparse matrix of shape (`XI.size`, `len(control_points)`), so that
            `N @ control_points` evaluates a scalar spline.
        """
        XI = np.asarray(XI, dtype="float").ravel()
        vals, row, col = [], [], []
        for i, basis_function in enumerate(build_basis(self.knot_vector, self.degree)):
            basis_function = FlattenerSpline.flatten(basis_function)
            for i_xi, xi in enumerate(XI):
                val = basis_function.evaluate(xi)
                if val != 0:
                    vals.append(val)
                    row.append(i_xi)
                    col.append(i)
        row = np.array(row, dtype="int")
        col = np.array(col, dtype="int")
        return sps.coo_matrix(
            (np.array(vals, dtype="float"), (row, col)),
            shape=(XI.size, len(self.control_points)),
        )

    def plot_basis(self, n_eval: int = 500, show: bool = True):
        """
        Plot every basis function over the whole knot vector.

        Knots are drawn as dotted vertical lines and the valid domain is shaded.
        The legend is hidden when there are more than 10 basis functions.

        Parameters
        ----------
        n_eval : int, optional
            Number of evaluation points. By default, 500.
        show : bool, optional
            Whether to display the plot immediately. By default, True.
        """
        XI = np.linspace(self.knot_vector[0], self.knot_vector[-1], n_eval)
        N = self.basis_matrix(XI).toarray()
        for idx in range(N.shape[1]):
            plt.plot(XI, N[:, idx], label=f"$N_{{{idx},{self.degree}}}(x)$")
        for xi in np.unique(self.knot_vector):
            plt.axvline(xi, color="gray", linestyle=":", linewidth=0.8)
        plt.axvspan(
            self.valid_domain.lower_boundary,
            self.valid_domain.upper_boundary,
            color="gray",
            alpha=0.1,
        )
        plt.xlabel("$x$")
        if N.shape[1] <= 10:
            plt.legend(loc="best")
        if show:
            plt.show()

    def plot(self, n_eval_per_span: int = 50, show: bool = True):
        """
        Plot the curve over its valid domain.

        Scalar splines are drawn as the graph of x -> spline(x); 2D splines are drawn
        in the plane along with their control polygon.

        Raises
        ------
        ValueError
            If the control points have more than 2 dimensions.
        """
        XI = self.linspace(n_eval_per_span)
        values = self.evaluate_many(XI)
        dimensions = self.dimensions
        if dimensions == 1:
            plt.plot(XI, values, label="$S(x)$")
            plt.xlabel("$x$")
        elif dimensions == 2:
            ctrl_pts = stack(self.control_points, 2)
            plt.plot(values[:, 0], values[:, 1], label="$S(x)$")
            plt.plot(
                ctrl_pts[:, 0],
                ctrl_pts[:, 1],
                marker="o",
                linestyle="--",
                color="gray",
                label="control polygon",
            )
            plt.gca().set_aspect("equal")
        else:
            raise ValueError(f"Can't plot in a {dimensions}D space.")
        plt.legend(loc="best")
        if show:
            plt.show()


def _as_knot_vector(knot_vector: Iterable[float]) -> np.ndarray[np.floating]:
    knot = np.array(knot_vector, dtype="float").ravel()
    knot.flags.writeable = False
    return knot


def _as_control_points(control_points: ControlPoints) -> list[Operand]:
    return [as_operand(control_point) for control_point in control_points]


def _check_degree(degree: int, n_control_points: int) -> None:
    if not (0 <= degree < n_control_points):
        raise InvalidDegreeError(degree, n_control_points)


def uniform_knot_vector(knots: int) -> np.ndarray[np.floating]:
    """
    Uniformly spaced knot vector of `knots` knots between 0 and 1.

    Examples
    --------
    >>> uniform_knot_vector(5)
    array([0.  , 0.25, 0.5 , 0.75, 1.  ])
    """
    if knots < 2:
        raise ValueError(f"A knot vector needs at least 2 knots, got {knots}.")
    return _as_knot_vector(np.arange(knots, dtype="float") / (knots - 1))


def step_basis(knot_vector: Iterable[float]) -> list[BasisPolynomial]:
    """
    Order one (degree 0) basis functions of a knot vector.

    The `i`-th basis function is the constant 1 on `[knot[i], knot[i + 1])`, which is
    empty for a repeated knot. The last non empty knot span is also closed on its upper
    side, so that the basis functions sum to 1 on the whole closed interval
    `[knot[0], knot[-1]]`.

    Examples
    --------
    >>> [b.evaluate(0.25) for b in step_basis([0., 0.5, 1.])]
    [1.0, 0]
    """
    knot = _as_knot_vector(knot_vector)
    non_empty = np.flatnonzero(np.diff(knot) > 0)
    last_span = non_empty[-1] if non_empty.size > 0 else -1
    return [
        BasisPolynomial(
            CONSTANT_ONE,
            SimpleRange(
                float(knot[i]),
                float(knot[i + 1]),
                bool(knot[i] < knot[i + 1]),
                bool(i == last_span),
            ),
        )
        for i in range(knot.size - 1)
    ]


def step_b_spline(knot_vector: Iterable[float], control_points: ControlPoints) -> BSpline:
    """
    Order one B-spline: piecewise constant curve taking the `i`-th control point value
    on the `i`-th knot span.

    Raises
    ------
    KnotCountMismatchError
        If the knot vector doesn't hold exactly one more knot than control points.
    """
    knot = _as_knot_vector(knot_vector)
    control_points = _as_control_points(control_points)
    if knot.size != len(control_points) + 1:
        raise KnotCountMismatchError(knot.size, len(control_points))
    basis = [
        basis_poly.multiply(control_point)
        for basis_poly, control_point in zip(step_basis(knot), control_points)
    ]
    return BSpline(basis, control_points, knot, 1)


def build_basis(knot_vector: Iterable[float], degree: int) -> list[Evaluable]:
    """
    Unscaled basis functions of degree `degree` of a knot vector.

    Starting from the step functions of `step_basis`, each order k basis function is
    blended from two order k - 1 ones:

        N_{i,k}(x) = (x - t_i) / (t_{i+k-1} - t_i) N_{i,k-1}(x)
                   + (t_{i+k} - x) / (t_{i+k} - t_{i+1}) N_{i+1,k-1}(x)

    A term whose knot span is zero (repeated knots) is dropped.

    Parameters
    ----------
    knot_vector : Iterable[float]
        Non decreasing knot vector of size m.
    degree : int
        Degree of the basis functions.

    Returns
    -------
    basis : list[Evaluable]
        The m - degree - 1 basis functions, as unflattened splines when `degree` > 0.
    """
    if degree < 0:
        raise ValueError(f"Degree must be non negative, got {degree}.")
    knot = _as_knot_vector(knot_vector)
    lower_basis = step_basis(knot)
    for build_order in range(2, degree + 2):
        higher_basis = []
        for i in range(len(lower_basis) - 1):
            terms = []
            left_span = knot[i + build_order - 1] - knot[i]
            if left_span != 0:
                terms.append(
                    lower_basis[i].multiply(
                        linear_polynomial(1 / left_span, -knot[i] / left_span)
                    )
                )
            right_span = knot[i + build_order] - knot[i + 1]
            if right_span != 0:
                terms.append(
                    lower_basis[i + 1].multiply(
                        linear_polynomial(
                            -1 / right_span, knot[i + build_order] / right_span
                        )
                    )
                )
            higher_basis.append(Spline(terms))
        logger.debug(
            "Built %d basis functions of order %d", len(higher_basis), build_order
        )
        lower_basis = higher_basis
    return lower_basis


def build_b_spline(
    knot_vector: Iterable[float],
    control_points: ControlPoints,
    degree: int,
    flatten: bool = True,
) -> BSpline:
    """
    Build a B-spline from its knot vector, control points and degree.

    Parameters
    ----------
    knot_vector : Iterable[float]
        Non decreasing knot vector. Must hold `len(control_points) + degree + 1` knots.
    control_points : ControlPoints
        Numbers, or sequences of numbers of the same length (turned into `Vector`s).
    degree : int
        Degree of the B-spline. Must be less than the number of control points.
    flatten : bool, optional
        Whether to flatten the basis into one term per knot span, which makes every
        evaluation cheaper. By default, True.

    Returns
    -------
    BSpline
        The built B-spline, of order `degree + 1`.

    Raises
    ------
    InvalidDegreeError
        If `degree` is negative or not less than the number of control points.
    KnotCountMismatchError
        If `degree` is 0 and the knot vector doesn't hold one more knot than control points.
    BasisCountMismatchError
        If the knot vector size doesn't match the number of control points and the degree.

    Examples
    --------
    >>> spline = build_b_spline([0., 0., 0., 1., 1., 1.], [0., 1., 0.], 2)
    >>> spline.evaluate(0.5)
    0.5
    """
    knot = _as_knot_vector(knot_vector)
    control_points = _as_control_points(control_points)
    _check_degree(degree, len(control_points))
    if degree == 0:
        return step_b_spline(knot, control_points)
    basis = build_basis(knot, degree)
    if len(basis) != len(control_points):
        raise BasisCountMismatchError(len(basis), len(control_points), knot.size, degree)
    spline = Spline(
        [
            basis_function.multiply(control_point)
            for basis_function, control_point in zip(basis, control_points)
        ]
    )
    if flatten:
        spline = FlattenerSpline.flatten(spline)
        logger.debug("Flattened B-spline into %d basis polynomials", len(spline.basis))
    return BSpline(spline.basis, control_points, knot, degree + 1)


def uniform_b_spline(
    control_points: ControlPoints, degree: int, flatten: bool = True
) -> BSpline:
    """B-spline with a uniform knot vector between 0 and 1."""
    control_points = _as_control_points(control_points)
    _check_degree(degree, len(control_points))
    return build_b_spline(
        uniform_knot_vector(len(control_points) + degree + 1),
        control_points,
        degree,
        flatten,
    )


def uniform_step_b_spline(control_points: ControlPoints) -> BSpline:
    """Order one B-spline with a uniform knot vector between 0 and 1."""
    control_points = _as_control_points(control_points)
    return step_b_spline(uniform_knot_vector(len(control_points) + 1), control_points)
