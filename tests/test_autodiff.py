import cmath
import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from jetdiff import Interval
from jetdiff import function as jdf
from jetdiff.autodiff import Jet, autodiff
from jetdiff.config import localcontext
from jetdiff.exceptions import DimensionMismatchError, UnsupportedOperationError

POINTS = [-2.0, -0.5, 0.0, 0.7, 3.1]


def test_deriv():
    deriv1 = autodiff.deriv(lambda x: (x + jdf.sin(x**2)) / x)
    deriv2 = autodiff.deriv(deriv1)
    assert pytest.approx(deriv1(1.4), 1e-5) == -1.23095
    assert pytest.approx(deriv2(1.4), 1e-5) == -3.96476


def test_grad():
    grad = autodiff.grad(jdf.pow)
    assert pytest.approx(grad(4.5, -2.2), 1e-5) == (-0.0178707, 0.0549797)

    grad = autodiff.grad(lambda x, y: jdf.exp(y / x) + 2)
    assert pytest.approx(grad(1.2, 3.5), 1e-5) == (-44.9157, 15.3997)


def test_jacobian():
    jacobian = autodiff.jac(lambda x, y: (jdf.sin(x * y), x**2 - jdf.cos(y)))
    matrix = jacobian(2, 3)
    assert pytest.approx(matrix[0], 1e-5) == (2.88051, 1.92034)
    assert pytest.approx(matrix[1], 1e-5) == (4.00000, 0.14112)


def test_concrete_scenarios():
    assert autodiff.derivative(lambda x: x**2 - 2, 3) == 6
    assert autodiff.derivative(lambda x: x**2 - 2, 2) == 4
    assert autodiff.derivative(lambda x: 3 * x**5 + 2, 2) == 240
    assert autodiff.gradient(lambda x, y: x**2 + x * y, (3, 4)) == (10, 3)


@pytest.mark.parametrize("a", POINTS)
def test_reference_derivative(a):
    def f(x):
        return (x * jdf.exp(x) - jdf.sin(x)) / (2 + jdf.cos(x))

    u = a * math.exp(a) - math.sin(a)
    du = math.exp(a) + a * math.exp(a) - math.cos(a)
    v = 2 + math.cos(a)
    dv = -math.sin(a)
    expected = (du * v - u * dv) / v**2
    assert autodiff.derivative(f, a) == pytest.approx(expected, rel=1e-10, abs=1e-12)


@pytest.mark.parametrize("a", POINTS)
def test_product_and_chain_rule(a):
    assert autodiff.derivative(lambda x: x * x, a) == pytest.approx(2 * a)
    expected = math.exp(math.sin(a)) * math.cos(a)
    chain = autodiff.derivative(lambda x: jdf.exp(jdf.sin(x)), a)
    assert chain == pytest.approx(expected, rel=1e-10)


@pytest.mark.parametrize("c", [-3.0, 0.5, 7.0])
def test_linearity(c):
    def f(x):
        return jdf.sin(x) * x - 1 / (1 + x**2)

    scaled = autodiff.derivative(lambda x: c * f(x), 0.8)
    assert scaled == pytest.approx(c * autodiff.derivative(f, 0.8), rel=1e-12)


def test_gradient_matches_partial_derivatives():
    def f(x, y, z):
        return x * y * z + jdf.sin(x) * z - y / z

    p = (0.3, -1.2, 2.5)
    g = autodiff.gradient(f, p)
    assert len(g) == 3
    assert g[0] == pytest.approx(autodiff.derivative(lambda t: f(t, p[1], p[2]), p[0]))
    assert g[1] == pytest.approx(autodiff.derivative(lambda t: f(p[0], t, p[2]), p[1]))
    assert g[2] == pytest.approx(autodiff.derivative(lambda t: f(p[0], p[1], t), p[2]))


def test_gradient_evaluates_once_per_coordinate():
    calls = []

    def f(*args):
        calls.append(args)
        return sum(x * x for x in args)

    g = autodiff.gradient(f, [1.0, 2.0, 3.0, 4.0])
    assert g == (2.0, 4.0, 6.0, 8.0)
    assert len(calls) == 4
    # exactly one coordinate is seeded in each pass
    assert all(sum(isinstance(x, Jet) for x in args) == 1 for args in calls)


def test_constant_function():
    assert autodiff.derivative(lambda x: 5.0, 2.0) == 0.0
    assert autodiff.gradient(lambda x, y: x + 1.0, (1.0, 2.0)) == (1.0, 0.0)


def test_higher_order():
    assert autodiff.deriv(autodiff.deriv(lambda x: x**3))(2.0) == 12.0
    ddsin = autodiff.deriv(autodiff.deriv(jdf.sin))
    assert ddsin(0.5) == pytest.approx(-math.sin(0.5))


def test_nested_drivers_keep_perturbations_apart():
    def f(x, y):
        return autodiff.derivative(lambda t: t * y, x)

    assert autodiff.gradient(f, (1.0, 2.0)) == (0.0, 1.0)

    # the captured variable is the left operand
    d = autodiff.deriv
    assert d(lambda a: d(lambda x: a * x)(a))(2.0) == 1.0
    assert d(lambda a: d(lambda x: x * a)(a))(2.0) == 1.0

    def g(a):
        return autodiff.derivative(lambda x: a * x**2 + x * a**2, 1.0)

    # d/da (2a + a**2) = 2 + 2a
    assert autodiff.derivative(g, 3.0) == 8.0


def test_keyword_arguments_are_not_differentiated():
    d = autodiff.derivative(lambda x, scale: scale * x**2, 3.0, scale=4.0)
    assert d == 24.0


def test_unsupported_operation():
    with pytest.raises(UnsupportedOperationError):
        autodiff.derivative(lambda x: math.sin(x), 1.0)

    with pytest.raises(UnsupportedOperationError):
        autodiff.derivative(lambda x: x if x > 0 else -x, 1.0)


def test_domain_error_propagates():
    with pytest.raises(ValueError):
        autodiff.derivative(jdf.log, -1.0)

    with pytest.raises(ZeroDivisionError):
        autodiff.derivative(lambda x: 1 / x, 0.0)


def test_dimension_mismatch():
    calls = []

    def f(x, y):
        calls.append((x, y))
        return x * y

    with pytest.raises(DimensionMismatchError):
        autodiff.gradient(f, (1.0, 2.0, 3.0))

    with pytest.raises(DimensionMismatchError):
        autodiff.gradient(f, ())

    with pytest.raises(DimensionMismatchError):
        autodiff.gradient(f, np.ones((2, 1)))

    with pytest.raises(DimensionMismatchError):
        autodiff.jacobian(f, (1.0, 2.0, 3.0))

    assert calls == []

    with pytest.raises(DimensionMismatchError):
        autodiff.jacobian(f, (1.0, 2.0))

    with pytest.raises(DimensionMismatchError):
        autodiff.gradient(lambda x, y: (x, y), (1.0, 2.0))


def test_jacobian_inconsistent_outputs():
    def f(x, y):
        return (x,) if isinstance(x, Jet) else (x, y)

    with pytest.raises(DimensionMismatchError):
        autodiff.jacobian(f, (1.0, 2.0))


def test_numpy_matrix():
    a = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=object)

    def f(x, y):
        return a @ np.array([x, y], dtype=object)

    assert autodiff.jacobian(f, np.array([1.0, 2.0])) == ((1.0, 2.0), (3.0, 4.0))

    def g(x, y):
        v = np.array([Jet.lift(x), Jet.lift(y)], dtype=object)
        return np.sum(np.exp(v) * v)

    expected = tuple(math.exp(t) * (1 + t) for t in (0.5, -0.25))
    assert autodiff.gradient(g, (0.5, -0.25)) == pytest.approx(expected)


def test_executor():
    def f(x, y, z):
        return jdf.exp(x * y) + jdf.cos(z) * y

    p = (0.2, 1.5, -0.7)
    expected = autodiff.gradient(f, p)

    with ThreadPoolExecutor(max_workers=3) as pool:
        assert autodiff.gradient(f, p, executor=pool) == expected

        with localcontext(executor=pool):
            assert autodiff.gradient(f, p) == expected
            assert autodiff.jacobian(lambda x, y, z: (f(x, y, z),), p) == (expected,)


def test_complex():
    z = 1.0 + 1.0j
    d = autodiff.derivative(lambda x: x**2 + jdf.exp(x), z)
    assert d == pytest.approx(2 * z + cmath.exp(z))


def test_mpmath():
    import mpmath

    d = autodiff.derivative(lambda x: jdf.sin(x) * x, mpmath.mpf("0.5"))
    assert isinstance(d, mpmath.mpf)
    assert float(d) == pytest.approx(math.cos(0.5) * 0.5 + math.sin(0.5))


def test_interval_enclosure():
    d = autodiff.derivative(lambda x: x**2 - 2 * x, Interval(1, 3))
    assert d.issuperset(Interval(0, 4))

    x = Interval(0, 1)
    d = autodiff.derivative(lambda x: jdf.exp(jdf.sin(x)), x)

    for t in np.linspace(0.0, 1.0, 11):
        assert math.exp(math.sin(t)) * math.cos(t) in d


def test_interval_gradient():
    g = autodiff.gradient(lambda x, y: x * y + y**2, (Interval(1, 2), Interval(-1, 1)))
    assert g[0].issuperset(Interval(-1, 1))
    assert g[1].issuperset(Interval(-1, 4))
