from typing import Iterable, Literal

from polyspline.exceptions import UnsupportedOperatorError

RangeOperator = Literal["union", "intersection"]

_OPERATOR_LATEX = {"union": "\\cup", "intersection": "\\cap"}


class Range:
    """
    Subset of the real numbers, described by a membership predicate.

    Ranges can be compared with `equals` (or `==`), which is a shallow comparison:
    two ranges built the same way are equal, but two differently built ranges
    describing the same set are not guaranteed to be.
    """

    is_complement: bool

    def is_in(self, point: float) -> bool:
        raise NotImplementedError

    def equals(self, other: "Range") -> bool:
        raise NotImplementedError

    def to_latex(self) -> str:
        raise NotImplementedError

    def __contains__(self, point: float) -> bool:
        return self.is_in(point)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.equals(other)


class SimpleRange(Range):
    """
    Continuous interval of real numbers between a lower and an upper boundary.

    Each boundary may or may not be inclusive. A complementary range contains every
    real number except those between the boundaries.

    Attributes
    ----------
    lower_boundary : float
        Lower boundary of the interval.
    upper_boundary : float
        Upper boundary of the interval.
    is_inclusive_lower : bool
        Whether `lower_boundary` belongs to the interval.
    is_inclusive_upper : bool
        Whether `upper_boundary` belongs to the interval.
    is_complement : bool
        Whether the range is the complement of the interval.

    Examples
    --------
    >>> r = SimpleRange(0., 1., True, False)
    >>> r.is_in(0.), r.is_in(1.)
    (True, False)
    >>> 2. in SimpleRange(0., 1., is_complement=True)
    True
    """

    lower_boundary: float
    upper_boundary: float
    is_inclusive_lower: bool
    is_inclusive_upper: bool
    is_complement: bool

    def __init__(
        self,
        lower_boundary: float,
        upper_boundary: float,
        is_inclusive_lower: bool = True,
        is_inclusive_upper: bool = True,
        is_complement: bool = False,
    ):
        self.lower_boundary = lower_boundary
        self.upper_boundary = upper_boundary
        self.is_inclusive_lower = is_inclusive_lower
        self.is_inclusive_upper = is_inclusive_upper
        self.is_complement = is_complement

    def is_in(self, point: float) -> bool:
        is_in = self.lower_boundary < point < self.upper_boundary or (
            (self.is_inclusive_lower and point == self.lower_boundary)
            or (self.is_inclusive_upper and point == self.upper_boundary)
        )
        return not is_in if self.is_complement else bool(is_in)

    def equals(self, other: Range) -> bool:
        if not isinstance(other, SimpleRange):
            return False
        return (
            self.lower_boundary == other.lower_boundary
            and self.upper_boundary == other.upper_boundary
            and self.is_inclusive_lower == other.is_inclusive_lower
            and self.is_inclusive_upper == other.is_inclusive_upper
            and self.is_complement == other.is_complement
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.lower_boundary,
                self.upper_boundary,
                self.is_inclusive_lower,
                self.is_inclusive_upper,
                self.is_complement,
            )
        )

    def to_latex(self) -> str:
        return (
            ("[" if self.is_inclusive_lower else "(")
            + f"{self.lower_boundary:g}, {self.upper_boundary:g}"
            + ("]" if self.is_inclusive_upper else ")")
            + ("'" if self.is_complement else "")
        )

    def __repr__(self) -> str:
        return f"SimpleRange({self.to_latex()})"


class CompositeRange(Range):
    """
    Range made of child ranges joined by a union or an intersection.

    Attributes
    ----------
    range_children : list[Range]
        Child ranges.
    operator : RangeOperator
        Either `"union"` or `"intersection"`.
    is_complement : bool
        Whether the range is the complement of the combination.

    Notes
    -----
    Equality only checks the operator, the complement flag and that the children are
    the very same objects. Two composite ranges made of equal but distinct children
    are not equal.
    """

    range_children: list[Range]
    operator: RangeOperator
    is_complement: bool

    def __init__(
        self,
        range_children: Iterable[Range],
        operator: RangeOperator = "union",
        is_complement: bool = False,
    ):
        if operator not in _OPERATOR_LATEX:
            raise UnsupportedOperatorError(operator)
        self.range_children = list(range_children)
        self.operator = operator
        self.is_complement = is_complement

    def is_in(self, point: float) -> bool:
        if self.operator == "union":
            is_in = any(child.is_in(point) for child in self.range_children)
        elif self.operator == "intersection":
            is_in = all(child.is_in(point) for child in self.range_children)
        else:
            raise UnsupportedOperatorError(self.operator)
        return not is_in if self.is_complement else is_in

    def equals(self, other: Range) -> bool:
        if not isinstance(other, CompositeRange):
            return False
        return (
            self.operator == other.operator
            and self.is_complement == other.is_complement
            and len(self.range_children) == len(other.range_children)
            and all(
                any(child is other_child for other_child in other.range_children)
                for child in self.range_children
            )
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.operator,
                self.is_complement,
                frozenset(id(child) for child in self.range_children),
            )
        )

    def to_latex(self) -> str:
        joined = _OPERATOR_LATEX[self.operator].join(
            child.to_latex() for child in self.range_children
        )
        return f"({joined})" + ("'" if self.is_complement else "")

    def __repr__(self) -> str:
        return f"CompositeRange({self.to_latex()})"


def uniform_split(
    lower_boundary: float, upper_boundary: float, segments: int
) -> list[SimpleRange]:
    """
    Split `[lower_boundary, upper_boundary]` into `segments` adjacent ranges of equal width.

    Every range is closed on its lower side and open on its upper side, except the last
    one which is closed on both sides. Each point of the interval thus belongs to
    exactly one range.

    Examples
    --------
    >>> [r.to_latex() for r in uniform_split(0., 1., 4)]
    ['[0, 0.25)', '[0.25, 0.5)', '[0.5, 0.75)', '[0.75, 1]']
    """
    if segments < 1:
        raise ValueError(f"Can't split a range into {segments} segments.")
    knot_coords = [lower_boundary]
    for knot in range(1, segments):
        knot_coords.append(
            (lower_boundary * (segments - knot) + upper_boundary * knot) / segments
        )
    ranges = [
        SimpleRange(lower, upper, True, False)
        for lower, upper in zip(knot_coords[:-1], knot_coords[1:])
    ]
    ranges.append(SimpleRange(knot_coords[-1], upper_boundary))
    return ranges
