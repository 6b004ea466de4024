"""
Exceptions raised by polyspline.

Every error is raised where it is detected and is never caught inside the package.
"""


class PolysplineError(Exception):
    """Base class of every polyspline error."""


class DimensionMismatchError(PolysplineError, ValueError):
    """Raised when vectors of different dimensions are combined."""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Incompatible vector cannot be combined: expected {expected} dimensions, got {got}."
        )


class NegativeOrZeroDimensionsError(PolysplineError, ValueError):
    """Raised when a vector is requested with zero or fewer dimensions."""

    def __init__(self, dimensions: int):
        self.dimensions = dimensions
        super().__init__(f"Negative/zero dimensions not allowed (got {dimensions}).")


class UnsupportedOperatorError(PolysplineError, ValueError):
    """Raised when a composite range is given an operator other than union or intersection."""

    def __init__(self, operator):
        self.operator = operator
        super().__init__(
            f"Only 'union' & 'intersection' operators allowed, got {operator!r}."
        )


class InvalidChildError(PolysplineError, TypeError):
    """Raised when a spline holds something that is neither a spline nor a basis polynomial."""

    def __init__(self, child):
        self.child = child
        super().__init__(
            f"Invalid polynomial type {type(child).__name__!r} given to a spline. "
            "Did you forget to wrap the basis polynomials in a list ?"
        )


class InvalidDegreeError(PolysplineError, ValueError):
    """Raised when the spline degree is not strictly less than the number of control points."""

    def __init__(self, degree: int, n_control_points: int):
        self.degree = degree
        self.n_control_points = n_control_points
        super().__init__(
            f"Degree of spline ({degree}) must be a non negative integer less than "
            f"the number of control points ({n_control_points})."
        )


class KnotCountMismatchError(PolysplineError, ValueError):
    """Raised when an order zero B-spline has not exactly one more knot than control points."""

    def __init__(self, n_knots: int, n_control_points: int):
        self.n_knots = n_knots
        self.n_control_points = n_control_points
        super().__init__(
            f"Order zero B-spline requires control points + 1 knots: got {n_knots} knots "
            f"for {n_control_points} control points."
        )


class BasisCountMismatchError(PolysplineError, RuntimeError):
    """
    Raised when the recursive construction ends with a number of basis functions
    different from the number of control points.
    """

    def __init__(self, n_basis: int, n_control_points: int, n_knots: int, degree: int):
        self.n_basis = n_basis
        self.n_control_points = n_control_points
        super().__init__(
            f"Built {n_basis} basis functions for {n_control_points} control points: "
            f"a degree {degree} B-spline needs control points + {degree + 1} knots, got {n_knots}."
        )
