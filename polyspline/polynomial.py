from typing import Iterable, Union

import numpy as np

from polyspline.vector import ZERO, Operand, Vector, add, as_operand, is_zero, safe_product


class Polynomial:
    """
    Polynomial in one real variable whose coefficients are numbers or `Vector`s.

    Coefficients are stored from the highest to the zeroth power of x. Leading zero
    coefficients are trimmed at construction so that the first stored coefficient is
    the one of the highest non zero power. A polynomial is immutable: arithmetic
    methods return new instances.

    Attributes
    ----------
    coef_list : tuple[Operand, ...]
        Coefficients from the highest to the zeroth power. Empty for the zero
        polynomial.
    degree : int
        Highest power with a non zero coefficient, `-1` for the zero polynomial.

    Examples
    --------
    >>> p = Polynomial([0, 1, -2])  # x - 2
    >>> p.degree, p.evaluate(3.)
    (1, 1.0)
    >>> Polynomial([Vector(1., 0.), Vector(0., 1.)]).evaluate(2.)
    Vector(2.0, 1.0)
    """

    coef_list: tuple[Operand, ...]

    def __init__(self, source: Union[Iterable, "Polynomial"]):
        if isinstance(source, Polynomial):
            self.coef_list = source.coef_list
            return
        coef_list = [as_operand(coef) for coef in source]
        leading_zeros = 0
        while leading_zeros < len(coef_list) and is_zero(coef_list[leading_zeros]):
            leading_zeros += 1
        self.coef_list = tuple(coef_list[leading_zeros:])

    @property
    def degree(self) -> int:
        return len(self.coef_list) - 1

    def coef(self, power: int) -> Operand:
        """Coefficient of `x**power`, zero beyond the degree."""
        if power < 0 or power > self.degree:
            return ZERO
        return self.coef_list[self.degree - power]

    def evaluate(self, param: float) -> Operand:
        """Evaluate the polynomial at `param` with Horner's method."""
        value = ZERO
        for coef in self.coef_list:
            value = add(safe_product(value, param), coef)
        return value

    def add(self, other: Union[float, "Polynomial"]) -> "Polynomial":
        """
        Sum of this polynomial and a number or another polynomial.

        A number is added to the zeroth power coefficient.
        """
        if not isinstance(other, Polynomial):
            if self.degree < 0:
                return Polynomial([other])
            sum_coef_list = list(self.coef_list)
            sum_coef_list[-1] = add(sum_coef_list[-1], as_operand(other))
            return Polynomial(sum_coef_list)
        degree = max(self.degree, other.degree)
        return Polynomial(
            [
                add(self.coef(power), other.coef(power))
                for power in range(degree, -1, -1)
            ]
        )

    def multiply(self, scale: Union[float, Vector, "Polynomial"]) -> "Polynomial":
        """
        Product of this polynomial and a number, a `Vector` or another polynomial.

        Numbers and vectors scale every coefficient (a vector coefficient times a
        vector gives their dot product). Two polynomials are convolved.
        """
        if not isinstance(scale, Polynomial):
            scale = as_operand(scale)
            return Polynomial([safe_product(coef, scale) for coef in self.coef_list])
        if self.degree < 0 or scale.degree < 0:
            return Polynomial([])
        degree = self.degree + scale.degree
        product_coef_list = []
        for power in range(degree, -1, -1):
            final_coef = ZERO
            for t_power in range(max(0, power - scale.degree), min(power, self.degree) + 1):
                final_coef = add(
                    final_coef,
                    safe_product(self.coef(t_power), scale.coef(power - t_power)),
                )
            product_coef_list.append(final_coef)
        return Polynomial(product_coef_list)

    def __add__(self, other):
        return self.add(other)

    __radd__ = __add__

    def __mul__(self, other):
        return self.multiply(other)

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.coef_list == other.coef_list

    __hash__ = None

    def to_latex(self, variable: str = "x") -> str:
        """
        LaTeX expression of the polynomial.

        Examples
        --------
        >>> Polynomial([2, 0, -1]).to_latex()
        '2x^{2} - 1'
        """
        terms = []
        for power in range(self.degree, -1, -1):
            coef = self.coef(power)
            if is_zero(coef):
                continue
            if power == 0:
                monomial = ""
            elif power == 1:
                monomial = variable
            else:
                monomial = f"{variable}^{{{power}}}"
            if isinstance(coef, Vector):
                text = "\\begin{pmatrix}" + " \\\\ ".join(f"{c:g}" for c in coef) + "\\end{pmatrix}"
                terms.append((" + " if terms else "") + text + monomial)
                continue
            sign = "-" if coef < 0 else "+"
            magnitude = abs(coef)
            text = "" if (magnitude == 1 and monomial) else f"{magnitude:g}"
            if terms:
                terms.append(f" {sign} {text}{monomial}")
            else:
                terms.append(("-" if sign == "-" else "") + text + monomial)
        return "".join(terms) if terms else "0"

    def __repr__(self) -> str:
        return f"Polynomial({list(self.coef_list)!r})"


def linear_polynomial(slope: float, intercept: float) -> Polynomial:
    """`slope * x + intercept`."""
    return Polynomial(np.array([slope, intercept], dtype="float"))
