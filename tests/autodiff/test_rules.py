import pytest

from jetdiff import function as jdf
from jetdiff.autodiff import (
    Jet,
    defderiv,
    derivative,
    gradient,
    lookup,
    primitive,
    registry,
)
from jetdiff.exceptions import UnsupportedOperationError


@primitive
def smooth_relu(x, /):
    return jdf.log(1 + jdf.exp(x))


defderiv(smooth_relu, lambda x: 1 / (1 + jdf.exp(-x)))


@primitive
def shift(x, y, /):
    return x + y


defderiv(shift, lambda x, y: 1.0, argnum=0)


@primitive
def opaque(x, /):
    return 2.0 * x


def test_user_primitive():
    assert derivative(smooth_relu, 0.0) == pytest.approx(0.5)
    assert smooth_relu(0.0) == pytest.approx(0.6931471805599453)
    assert registry()["smooth_relu"] is smooth_relu


def test_missing_rule():
    assert opaque(3.0) == 6.0

    with pytest.raises(UnsupportedOperationError):
        derivative(opaque, 3.0)

    assert derivative(lambda x: shift(x, 2.0), 1.0) == 1.0

    with pytest.raises(UnsupportedOperationError):
        gradient(shift, (1.0, 2.0))


def test_registration_is_write_once():
    with pytest.raises(ValueError):

        @primitive
        def exp(x, /):
            return x

    with pytest.raises(ValueError):
        defderiv(smooth_relu, lambda x: x)

    with pytest.raises(ValueError):
        defderiv(lambda x: x, lambda x: 1)


def test_registry():
    view = registry()

    for name in ("exp", "log", "sin", "cos", "pow", "sqrt"):
        assert name in view

    with pytest.raises(TypeError):
        view["foo"] = jdf.exp  # type: ignore


def test_lookup():
    assert lookup("exp") is jdf.exp
    assert lookup("arctan") is jdf.atan

    with pytest.raises(UnsupportedOperationError):
        lookup("erf")


def test_primitive_mixed_levels():
    # the lower-level jet is passed through as a constant
    x = Jet(Jet(1.0, 1.0), 1.0)
    y = Jet(2.0, 0.5)
    z = jdf.pow(x, y)
    assert z.level == 2
    assert z.tangent.value == pytest.approx(2.0)
