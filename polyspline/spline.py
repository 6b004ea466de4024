from typing import Callable, Iterable, Union

from polyspline.exceptions import InvalidChildError
from polyspline.polynomial import Polynomial
from polyspline.ranges import Range
from polyspline.vector import ZERO, Operand, Vector, add

Combiner = Callable[..., Operand]


def linear_combiner(*data_points: Operand) -> Operand:
    """Sum of the given evaluations."""
    return add(*data_points)


class BasisPolynomial:
    """
    Polynomial giving support only in a range, outside of which it evaluates to zero.

    Attributes
    ----------
    polynomial : Polynomial
        Polynomial evaluated inside the support range.
    support_range : Range
        Range outside of which the basis polynomial is zero.

    Examples
    --------
    >>> from polyspline.ranges import SimpleRange
    >>> b = BasisPolynomial(Polynomial([1, 0]), SimpleRange(0., 1.))
    >>> b.evaluate(0.5), b.evaluate(2.)
    (0.5, 0)
    """

    polynomial: Polynomial
    support_range: Range

    def __init__(self, polynomial: Polynomial, support_range: Range):
        self.polynomial = polynomial
        self.support_range = support_range

    def evaluate(self, param: float) -> Operand:
        if not self.support_range.is_in(param):
            return ZERO
        return self.polynomial.evaluate(param)

    def multiply(self, scale: Union[float, Vector, Polynomial]) -> "BasisPolynomial":
        return BasisPolynomial(self.polynomial.multiply(scale), self.support_range)

    def to_latex(self, variable: str = "x") -> str:
        return (
            f"{self.polynomial.to_latex(variable)},\\mspace{{4mu}}"
            f"{variable} \\in {self.support_range.to_latex()}"
        )

    def __repr__(self) -> str:
        return f"BasisPolynomial({self.polynomial!r}, {self.support_range!r})"


Evaluable = Union[BasisPolynomial, "Spline"]


class Spline:
    """
    Combination of basis polynomials, each giving support in its own range.

    A spline is evaluated by evaluating each of its basis elements and reducing the
    results with its combiner function, a sum by default. The basis may contain
    splines themselves, which ultimately stand for a group of basis polynomials.

    Attributes
    ----------
    basis : list[Evaluable]
        Basis polynomials or splines composing this spline.
    combiner : Combiner
        Function called with every basis evaluation as positional arguments and
        returning the spline evaluation.

    Examples
    --------
    >>> from polyspline.ranges import SimpleRange
    >>> step = BasisPolynomial(Polynomial([1]), SimpleRange(0., 1.))
    >>> Spline([step, step.multiply(2.)]).evaluate(0.5)
    3.0
    """

    basis: list[Evaluable]
    combiner: Combiner

    def __init__(
        self, basis: Iterable[Evaluable] = (), combiner: Combiner = linear_combiner
    ):
        if isinstance(basis, (BasisPolynomial, Spline)) or isinstance(
            combiner, (BasisPolynomial, Spline)
        ):
            raise InvalidChildError(basis)
        basis = list(basis)
        for child in basis:
            if not isinstance(child, (BasisPolynomial, Spline)):
                raise InvalidChildError(child)
        self.basis = basis
        self.combiner = combiner

    def evaluate(self, point: float) -> Operand:
        return self.combiner(*(child.evaluate(point) for child in self.basis))

    def multiply(self, scale: Union[float, Vector, Polynomial]) -> "Spline":
        """Product of this spline and `scale`, distributed over its basis."""
        return Spline([child.multiply(scale) for child in self.basis], self.combiner)

    def to_latex(self, variable: str = "x") -> str:
        return " + ".join(f"\\left({child.to_latex(variable)}\\right)" for child in self.basis)

    def __len__(self) -> int:
        return len(self.basis)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.basis)} terms)"


class FlattenerSpline(Spline):
    """
    Spline whose basis is a flat list of basis polynomials with distinct support ranges.

    Flattening is a one time cost after which an evaluation only costs one range test
    and one polynomial evaluation per distinct support range, whatever the depth of the
    spline being flattened.
    """

    basis: list[BasisPolynomial]

    def __init__(self, combiner: Combiner = linear_combiner):
        super().__init__([], combiner)

    def flat_add(self, element: Evaluable) -> None:
        """
        Add a basis element, merging it into an existing one with the same support range.

        Splines are not added themselves: their basis polynomials are recursively added
        instead. A basis polynomial is copied before being stored, so merging never
        alters the spline being flattened.

        Raises
        ------
        InvalidChildError
            If `element` is neither a `Spline` nor a `BasisPolynomial`.
        """
        if isinstance(element, Spline):
            for child in element.basis:
                self.flat_add(child)
        elif isinstance(element, BasisPolynomial):
            for basis_poly in self.basis:
                if basis_poly.support_range.equals(element.support_range):
                    basis_poly.polynomial = basis_poly.polynomial.add(element.polynomial)
                    return
            self.basis.append(BasisPolynomial(element.polynomial, element.support_range))
        else:
            raise InvalidChildError(element)

    @classmethod
    def flatten(cls, spline: Evaluable) -> "FlattenerSpline":
        """
        Flatten a spline into a single level of basis polynomials.

        Basis polynomials sharing a support range (as told by `Range.equals`) are
        summed into one.
        """
        flattener = cls()
        flattener.flat_add(spline)
        return flattener
