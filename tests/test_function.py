import math

import mpmath
import pytest

from jetdiff import Interval
from jetdiff import function as jdf
from jetdiff.autodiff import derivative, gradient
from jetdiff.exceptions import UnsupportedOperationError


@pytest.mark.parametrize(
    "fun, x, expected",
    [
        (jdf.exp, 0.3, math.exp(0.3)),
        (jdf.log, 2.5, 1 / 2.5),
        (jdf.sqrt, 2.0, 1 / (2 * math.sqrt(2.0))),
        (jdf.sin, 0.4, math.cos(0.4)),
        (jdf.cos, 0.4, -math.sin(0.4)),
        (jdf.tan, 0.4, 1 / math.cos(0.4) ** 2),
        (jdf.asin, 0.4, 1 / math.sqrt(1 - 0.4**2)),
        (jdf.acos, 0.4, -1 / math.sqrt(1 - 0.4**2)),
        (jdf.atan, 0.4, 1 / (1 + 0.4**2)),
        (jdf.sinh, 0.4, math.cosh(0.4)),
        (jdf.cosh, 0.4, math.sinh(0.4)),
        (jdf.tanh, 0.4, 1 / math.cosh(0.4) ** 2),
        (jdf.pi, 0.4, 0.0),
    ],
)
def test_derivative_rules(fun, x, expected):
    assert derivative(fun, x) == pytest.approx(expected, rel=1e-12, abs=1e-15)


def test_pow():
    g = gradient(jdf.pow, (1.7, 2.3))
    assert g[0] == pytest.approx(2.3 * 1.7**1.3)
    assert g[1] == pytest.approx(math.log(1.7) * 1.7**2.3)
    assert jdf.pow(2, 10) == 1024.0


def test_values():
    assert jdf.exp(1.0) == pytest.approx(math.e)
    assert jdf.log(math.e) == pytest.approx(1.0)
    assert jdf.pi(0.0) == math.pi
    assert jdf.sqrt(-4 + 0j) == 2j
    assert jdf.sin(mpmath.mpf(1)) == mpmath.sin(1)


def test_domain_errors():
    with pytest.raises(ValueError):
        jdf.log(-1.0)

    with pytest.raises(ValueError):
        jdf.sqrt(-1.0)

    with pytest.raises(ValueError):
        jdf.asin(1.5)


def test_unsupported_type():
    with pytest.raises(UnsupportedOperationError):
        jdf.exp("1.0")

    with pytest.raises(UnsupportedOperationError):
        jdf.pow("2", 3)


def test_intervals():
    x = Interval(1, 2)
    assert jdf.exp(x).issuperset(Interval(math.exp(1), math.exp(2)))
    assert math.pi in jdf.pi(x)
    assert jdf.sqrt(Interval(4)).issuperset(Interval(2))
    assert jdf.pow(x, 2).issuperset(Interval(1, 4))
