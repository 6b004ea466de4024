from typing import Iterable

import numpy as np
import numba as nb
import scipy.sparse as sps


@nb.njit(nb.float64[:](nb.int64, nb.float64[:], nb.float64), cache=True)
def _basis_row(degree, knot, xi):
    """
    Values at `xi` of every basis function of degree `degree`.

    The step functions are set first, then blended in place one order at a time, each
    order k function only reading the order k - 1 functions `j` and `j + 1`.

    Parameters
    ----------
    degree : int
        Degree of the basis functions.
    knot : numpy.array of float
        Knot vector.
    xi : float
        Parameter at which the basis functions are evaluated.

    Returns
    -------
    row : numpy.array of float
        The `knot.size - degree - 1` basis function values.

    """
    n_spans = knot.size - 1
    last_span = -1
    for j in range(n_spans):
        if knot[j] < knot[j + 1]:
            last_span = j
    row = np.zeros(n_spans, dtype=np.float64)
    for j in range(n_spans):
        if knot[j] < knot[j + 1]:
            if knot[j] <= xi and xi < knot[j + 1]:
                row[j] = 1.0
            elif j == last_span and xi == knot[j + 1]:
                row[j] = 1.0
    for order in range(2, degree + 2):
        for j in range(n_spans - order + 1):
            blended = 0.0
            left_span = knot[j + order - 1] - knot[j]
            if left_span != 0.0:
                blended += (xi - knot[j]) / left_span * row[j]
            right_span = knot[j + order] - knot[j + 1]
            if right_span != 0.0:
                blended += (knot[j + order] - xi) / right_span * row[j + 1]
            row[j] = blended
    return row[: n_spans - degree]


@nb.njit(
    nb.types.UniTuple.from_types((nb.float64[:], nb.int64[:], nb.int64[:]))(
        nb.int64, nb.float64[:], nb.float64[:]
    ),
    cache=True,
)
def _basis_entries(degree, knot, XI):
    # at most degree + 1 basis functions are non zero at a given parameter
    size = XI.size * (degree + 1)
    vals = np.empty(size, dtype=np.float64)
    rows = np.empty(size, dtype=np.int64)
    cols = np.empty(size, dtype=np.int64)
    count = 0
    for i_xi in range(XI.size):
        row = _basis_row(degree, knot, XI[i_xi])
        for i in range(row.size):
            if row[i] != 0.0:
                vals[count] = row[i]
                rows[count] = i_xi
                cols[count] = i
                count += 1
    return (vals[:count], rows[:count], cols[:count])


def basis_value(i: int, degree: int, knot: Iterable[float], xi: float) -> float:
    """
    Evaluate the `i`-th basis function of degree `degree` at `xi`.

    Zero length knot spans drop the corresponding term of the recursion, and a
    repeated knot gives an empty step function.

    Examples
    --------
    >>> basis_value(0, 1, [0., 0.5, 1.], 0.5)
    1.0
    """
    knot = np.array(knot, dtype=np.float64)
    return float(_basis_row(degree, knot, float(xi))[i])


def basis_matrix(
    knot: Iterable[float], degree: int, XI: Iterable[float]
) -> sps.coo_matrix:
    """
    Evaluate every basis function of degree `degree` at every parameter of `XI`.

    Parameters
    ----------
    knot : Iterable[float]
        Non decreasing knot vector.
    degree : int
        Degree of the basis functions.
    XI : Iterable[float]
        Parameters at which the basis functions are evaluated.

    Returns
    -------
    N : sps.coo_matrix
        Sparse matrix of shape (`XI.size`, `knot.size - degree - 1`): each row holds
        the values of the basis functions at one parameter.

    Examples
    --------
    >>> basis_matrix([0., 0., 0., 1., 1., 1.], 2, [0., 0.5, 1.]).toarray()
    array([[1.  , 0.  , 0.  ],
           [0.25, 0.5 , 0.25],
           [0.  , 0.  , 1.  ]])
    """
    knot = np.array(knot, dtype=np.float64)
    XI = np.array(XI, dtype=np.float64).ravel()
    vals, rows, cols = _basis_entries(degree, knot, XI)
    return sps.coo_matrix((vals, (rows, cols)), shape=(XI.size, knot.size - degree - 1))
