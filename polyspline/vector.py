from typing import Callable, Iterable, Union

import numpy as np

from polyspline.exceptions import DimensionMismatchError, NegativeOrZeroDimensionsError


class Vector:
    """
    Immutable vector of a fixed number of real components.

    A `Vector` is the value type used for vector valued polynomial coefficients,
    control points and spline evaluations. Its components are stored in a read-only
    numpy array, so a `Vector` never changes once constructed.

    The number `0` (see `ZERO`) acts as the additive identity of every dimension: the
    module level functions accepting a `Vector` also accept `0` and treat it as a zero
    vector of whatever dimension the other operands imply.

    Attributes
    ----------
    dimensions : int
        Number of components of the vector.
    x, y, z : float
        First, second and third components. `0.` when the vector has fewer
        dimensions.

    Examples
    --------
    >>> v = Vector(1., 2.)
    >>> v.dimensions, v.x, v.y, v.z
    (2, 1.0, 2.0, 0.0)
    >>> v + Vector(3., 4.)
    Vector(4.0, 6.0)
    """

    def __init__(self, *components: float):
        """
        Create a vector from its components.

        Parameters
        ----------
        *components : float
            Components of the vector. A single iterable argument (list, tuple,
            `np.ndarray` or `Vector`) is unpacked.

        Raises
        ------
        NegativeOrZeroDimensionsError
            If no component is given.
        """
        if len(components) == 1 and np.ndim(components[0]) > 0:
            components = components[0]
        array = np.array(components, dtype="float").ravel()
        if array.size == 0:
            raise NegativeOrZeroDimensionsError(0)
        array.flags.writeable = False
        self._components = array

    @property
    def components(self) -> np.ndarray[np.floating]:
        return self._components

    @property
    def dimensions(self) -> int:
        return self._components.size

    def _clipped(self, index: int) -> float:
        if index < self.dimensions:
            return float(self._components[index])
        return 0.0

    @property
    def x(self) -> float:
        return self._clipped(0)

    @property
    def y(self) -> float:
        return self._clipped(1)

    @property
    def z(self) -> float:
        return self._clipped(2)

    def __len__(self) -> int:
        return self.dimensions

    def __getitem__(self, index):
        return float(self._components[index])

    def __iter__(self):
        return (float(c) for c in self._components)

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._components.copy()
        return self._components.astype(dtype)

    def __repr__(self) -> str:
        return f"Vector({', '.join(repr(c) for c in self)})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return np.array_equal(self._components, other._components)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __add__(self, other):
        return add(self, other)

    __radd__ = __add__

    def __neg__(self) -> "Vector":
        return scale_vector(self, -1.0)

    def __sub__(self, other):
        return add(self, safe_product(other, -1.0))

    def __rsub__(self, other):
        return add(other, scale_vector(self, -1.0))

    def __mul__(self, other):
        return safe_product(self, other)

    __rmul__ = __mul__

    def add(self, *others):
        return add(self, *others)

    def scale_vector(self, scale: float):
        return scale_vector(self, scale)

    def dot_product(self, other) -> float:
        return dot_product(self, other)

    scalar_product = dot_product

    def safe_product(self, other):
        return safe_product(self, other)


Operand = Union[float, Vector]

# Additive identity of every dimension.
ZERO = 0


def is_vector(arg) -> bool:
    """Tell if `arg` can be used as a vector operand (a `Vector` or the zero sentinel)."""
    return isinstance(arg, Vector) or is_zero(arg)


def is_zero(arg) -> bool:
    """Tell if `arg` is the zero sentinel."""
    return not isinstance(arg, Vector) and np.ndim(arg) == 0 and arg == 0


def as_operand(arg) -> Operand:
    """
    Coerce `arg` into a value the arithmetic functions understand.

    Numbers are returned as floats (the zero sentinel is kept as is), vectors are
    returned unchanged and any other iterable is turned into a `Vector`.

    Examples
    --------
    >>> as_operand([1, 2])
    Vector(1.0, 2.0)
    >>> as_operand(3)
    3.0
    """
    if isinstance(arg, Vector) or is_zero(arg):
        return arg
    if np.ndim(arg) == 0:
        return float(arg)
    return Vector(arg)


def safe_dimens(arg: Operand) -> int:
    """Number of dimensions of `arg`, `1` for numbers and for the zero sentinel."""
    if isinstance(arg, Vector):
        return arg.dimensions
    return 1


def safe_one_d_value(arg: Operand) -> float:
    """First component of a vector, or the number itself."""
    if isinstance(arg, Vector):
        return arg[0]
    return arg


def safe_update_component(
    arg: Operand, component: int, value: float, dimensions: int
) -> Operand:
    """
    Return a copy of `arg` where the component `component` is set to `value`.

    Parameters
    ----------
    arg : Operand
        Vector to modify. The zero sentinel is expanded to `dimensions` zeros.
    component : int
        Index of the component to change.
    value : float
        New value of the component.
    dimensions : int
        Number of dimensions used when `arg` is the zero sentinel.

    Returns
    -------
    Operand
        The modified vector, or `value` itself when `arg` is a plain number.
    """
    if is_zero(arg):
        components = np.zeros(dimensions, dtype="float")
    elif isinstance(arg, Vector):
        components = np.array(arg)
    else:
        return value
    components[component] = value
    return Vector(components)


def safe_update_dimensions(arg: Operand, dimensions: int) -> Vector:
    """
    Pad with zeros or truncate `arg` so that it has `dimensions` components.

    A plain number is promoted to a vector whose first component is the number.

    Raises
    ------
    NegativeOrZeroDimensionsError
        If `dimensions` is zero or negative.

    Examples
    --------
    >>> safe_update_dimensions(Vector(1., 2., 3.), 2)
    Vector(1.0, 2.0)
    >>> safe_update_dimensions(5., 3)
    Vector(5.0, 0.0, 0.0)
    """
    if dimensions <= 0:
        raise NegativeOrZeroDimensionsError(dimensions)
    if is_zero(arg):
        return Vector(np.zeros(dimensions, dtype="float"))
    if isinstance(arg, Vector):
        if arg.dimensions == dimensions:
            return arg
        components = np.zeros(dimensions, dtype="float")
        kept = min(dimensions, arg.dimensions)
        components[:kept] = arg.components[:kept]
        return Vector(components)
    components = np.zeros(dimensions, dtype="float")
    components[0] = arg
    return Vector(components)


def operand_dimens(*args: Operand) -> int:
    """Dimensions implied by the first non zero operand, `1` if all of them are zero."""
    for arg in args:
        if not is_zero(arg):
            return safe_dimens(arg)
    return 1


def add(*args: Operand) -> Operand:
    """
    Sum numbers or vectors.

    Zero sentinels are skipped. Plain numbers sum to a plain number; as soon as one
    operand is a `Vector` the result is a `Vector` and every non zero operand must
    share its dimensions (numbers only mix with one dimensional vectors).

    Raises
    ------
    DimensionMismatchError
        If two operands have different dimensions.

    Examples
    --------
    >>> add(1., 2.)
    3.0
    >>> add(Vector(1., 2.), 0, Vector(3., 4.))
    Vector(4.0, 6.0)
    """
    dimensions = operand_dimens(*args)
    has_vector = False
    total = np.zeros(dimensions, dtype="float")
    for arg in args:
        if is_zero(arg):
            continue
        if isinstance(arg, Vector):
            has_vector = True
            if arg.dimensions != dimensions:
                raise DimensionMismatchError(dimensions, arg.dimensions)
            total += arg.components
        else:
            if dimensions != 1:
                raise DimensionMismatchError(dimensions, 1)
            total[0] += arg
    if has_vector:
        return Vector(total)
    if dimensions == 1 and any(not is_zero(arg) for arg in args):
        return float(total[0])
    return ZERO


def scale_vector(vector: Operand, scale: float) -> Operand:
    """
    Multiply every component of `vector` by `scale`. The zero sentinel stays zero and
    a plain number is simply multiplied.
    """
    if is_zero(vector):
        return ZERO
    if not isinstance(vector, Vector):
        return vector * scale
    return Vector(vector.components * scale)


scale = scale_vector


def dot_product(v1: Operand, v2: Operand) -> float:
    """
    Scalar product of two vectors of the same dimensions.

    Raises
    ------
    DimensionMismatchError
        If the vectors have different dimensions.
    """
    if is_zero(v1) or is_zero(v2):
        return 0.0
    if v1.dimensions != v2.dimensions:
        raise DimensionMismatchError(v1.dimensions, v2.dimensions)
    return float(np.dot(v1.components, v2.components))


scalar_product = dot_product
dot = dot_product


def safe_product(a: Operand, b: Operand) -> Operand:
    """
    Multiply two operands whatever their kind.

    vector * vector is the dot product, vector * number scales the vector and
    number * number is the usual product. A zero operand gives the zero sentinel.

    Examples
    --------
    >>> safe_product(Vector(1., 2.), 3.)
    Vector(3.0, 6.0)
    >>> safe_product(Vector(1., 2.), Vector(3., 4.))
    11.0
    """
    if is_zero(a) or is_zero(b):
        return ZERO
    is_vector_a = isinstance(a, Vector)
    is_vector_b = isinstance(b, Vector)
    if is_vector_a and is_vector_b:
        return dot_product(a, b)
    if is_vector_a:
        return scale_vector(a, b)
    if is_vector_b:
        return scale_vector(b, a)
    return a * b


def iterate_vector(
    vector: Operand,
    call: Callable[[float, int, Operand], None],
    force_dimension_on_zero: int = 1,
) -> None:
    """
    Call `call(value, index, vector)` on every component of `vector`.

    The zero sentinel is iterated as `force_dimension_on_zero` zero components and a
    number as a single component.
    """
    if is_zero(vector):
        for index in range(force_dimension_on_zero):
            call(0.0, index, vector)
    elif isinstance(vector, Vector):
        for index, value in enumerate(vector):
            call(value, index, vector)
    elif np.ndim(vector) == 0 and np.isfinite(vector):
        call(float(vector), 0, vector)
    else:
        raise ValueError(f"Illegal vector argument {vector!r}.")


def map_vector(
    vector: Operand,
    call: Callable[[float, int, Operand], object],
    force_dimension_on_zero: int = 1,
) -> list:
    """Collect `call(value, index, vector)` over the components of `vector`."""
    mapped = []
    iterate_vector(
        vector,
        lambda value, index, vec: mapped.append(call(value, index, vec)),
        force_dimension_on_zero,
    )
    return mapped


def stack(values: Iterable[Operand], dimensions: int = 1) -> np.ndarray[np.floating]:
    """
    Stack evaluations into an array.

    Returns an array of shape `(n,)` when `dimensions` is `1`, `(n, dimensions)`
    otherwise; zero sentinels become rows of zeros.
    """
    rows = [map_vector(value, lambda c, i, v: c, dimensions) for value in values]
    array = np.array(rows, dtype="float").reshape((-1, dimensions))
    if dimensions == 1:
        return array[:, 0]
    return array
