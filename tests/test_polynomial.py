import numpy as np
import pytest
from polyspline.polynomial import Polynomial, linear_polynomial
from polyspline.vector import Vector

def test___init__():
    p = Polynomial([0, 0, 1, 2])
    assert p.degree==1 and p.coef_list==(1., 2.)
    q = Polynomial(p)
    assert q==p and q is not p

def test_zero_polynomial():
    p = Polynomial([0, 0])
    assert p.degree==-1 and p.coef_list==() and p.evaluate(3.)==0
    assert p.multiply(Polynomial([1, 1])).degree==-1
    assert p.add(2.).coef_list==(2.,)

def test_coef():
    p = Polynomial([3, 2, 1])
    assert p.coef(0)==1. and p.coef(2)==3. and p.coef(3)==0 and p.coef(-1)==0

def test_evaluate():
    p = Polynomial([1, -3, 2])  # (x - 1)(x - 2)
    assert p.evaluate(1.)==0. and p.evaluate(2.)==0. and p.evaluate(0.)==2. and p.evaluate(3.)==2.

def test_evaluate_vector_coefficients():
    p = Polynomial([Vector(1., 0.), Vector(0., 1.), Vector(1., 1.)])
    np.testing.assert_allclose(np.asarray(p.evaluate(2.)), [5., 3.])
    assert p.evaluate(0.)==Vector(1., 1.)

def test_add():
    assert Polynomial([1, 2]).add(3.).coef_list==(1., 5.)
    assert Polynomial([1, 0, 0]).add(Polynomial([2, 1])).coef_list==(1., 2., 1.)
    # leading terms cancelling lower the degree
    assert Polynomial([1, 1]).add(Polynomial([-1, 1])).degree==0

def test_multiply():
    assert Polynomial([1, 2]).multiply(3.).coef_list==(3., 6.)
    assert Polynomial([1, 2]).multiply(Vector(1., -1.)).coef_list==(Vector(1., -1.), Vector(2., -2.))
    assert Polynomial([Vector(1., 2.)]).multiply(Vector(3., 4.)).coef_list==(11.,)
    assert Polynomial([1, 1]).multiply(Polynomial([1, -1])).coef_list==(1., 0., -1.)
    assert Polynomial([1, 1]).multiply(0.).degree==-1

def test_operators():
    p, q = Polynomial([1, 1]), Polynomial([2])
    assert (p + q).coef_list==(1., 3.) and (p * q).coef_list==(2., 2.) and (2.*p).coef_list==(2., 2.)

@pytest.fixture
def random_polynomials():
    rng = np.random.default_rng(0)
    return [Polynomial(rng.uniform(-2, 2, size=n)) for n in (1, 2, 3, 5)]

def test_algebra_laws(random_polynomials):
    """Sums and products of polynomials evaluate to the sums and products of evaluations."""
    for p in random_polynomials:
        for q in random_polynomials:
            for x in np.linspace(-2, 2, 9):
                assert np.isclose(p.add(q).evaluate(x), p.evaluate(x) + q.evaluate(x))
                assert np.isclose(p.multiply(q).evaluate(x), p.evaluate(x)*q.evaluate(x))
                assert np.isclose(p.multiply(1).evaluate(x), p.evaluate(x))

def test_vector_polynomial_product():
    p = Polynomial([Vector(1., 2.), Vector(0., 1.)])
    q = Polynomial([1, -1])
    for x in (-1., 0.5, 2.):
        np.testing.assert_allclose(np.asarray(p.multiply(q).evaluate(x)), np.asarray(p.evaluate(x))*q.evaluate(x))

def test_linear_polynomial():
    p = linear_polynomial(2., -1.)
    assert p.degree==1 and p.evaluate(2.)==3.

def test_to_latex():
    assert Polynomial([2, 0, -1]).to_latex()=="2x^{2} - 1"
    assert Polynomial([-1, 1, 0]).to_latex("t")=="-t^{2} + t"
    assert Polynomial([]).to_latex()=="0"
