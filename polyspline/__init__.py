"""
.. include:: ../README.md
"""
from polyspline.exceptions import (PolysplineError, 
                                   DimensionMismatchError, 
                                   NegativeOrZeroDimensionsError, 
                                   UnsupportedOperatorError, 
                                   InvalidChildError, 
                                   InvalidDegreeError, 
                                   KnotCountMismatchError, 
                                   BasisCountMismatchError)
from polyspline.vector import (Vector, 
                               ZERO, 
                               add, 
                               scale_vector, 
                               dot_product, 
                               safe_product, 
                               safe_update_dimensions)
from polyspline.ranges import SimpleRange, CompositeRange, uniform_split
from polyspline.polynomial import Polynomial
from polyspline.spline import BasisPolynomial, Spline, FlattenerSpline, linear_combiner
from polyspline.b_spline import (BSpline, 
                                 build_b_spline, 
                                 build_basis, 
                                 step_basis, 
                                 step_b_spline, 
                                 uniform_knot_vector, 
                                 uniform_b_spline, 
                                 uniform_step_b_spline)
from polyspline.cox_de_boor import basis_value, basis_matrix
