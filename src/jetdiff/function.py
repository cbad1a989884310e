"""
##################################################
Elementary functions (:mod:`jetdiff.function`)
##################################################

.. currentmodule:: jetdiff.function

This module provides the elementary functions that can be differentiated. Each of
them accepts plain numbers (``int``, ``float``, ``complex`` and numpy scalars),
:mod:`mpmath` numbers, :class:`~jetdiff.interval.Interval`, and
:class:`~jetdiff.autodiff.Jet` over any of these.

Functions of :mod:`math` and :mod:`cmath` cannot be applied to jets; use the functions
below instead. New functions are added with :func:`jetdiff.autodiff.primitive` and
:func:`jetdiff.autodiff.defderiv`.

Constants
=========

.. autosummary::
    :toctree: generated/

    pi

Power, exponents, and logarithmic functions
===========================================

.. autosummary::
    :toctree: generated/

    exp
    log
    pow
    sqrt

Trigonometric and hyperbolic functions
======================================

.. autosummary::
    :toctree: generated/

    sin
    cos
    tan
    asin
    acos
    atan
    sinh
    cosh
    tanh

"""

import cmath
import math
import numbers
from collections.abc import Callable
from typing import Any

import mpmath
import mpmath.ctx_mp_python

from jetdiff.autodiff.rules import defderiv, primitive
from jetdiff.exceptions import UnsupportedOperationError


def _apply(
    x: Any, fun: Callable, real: Callable, cplx: Callable | None, mp: Callable
) -> Any:
    if overload := getattr(type(x), "_jetdiff_overload_", None):
        if (res := overload(x, fun, x)) is not NotImplemented:
            return res

        raise UnsupportedOperationError(
            f"{fun.__name__} is not defined for {type(x).__name__}"
        )

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mp(x)

        case numbers.Real():
            return real(x)

        case numbers.Complex() if cplx is not None:
            return cplx(x)

        case _:
            raise UnsupportedOperationError(
                f"{fun.__name__} is not defined for {type(x).__name__}"
            )


@primitive
def pi(x, /):
    """Pi, in the number system of `x`.

    Examples
    --------
    >>> from jetdiff import Interval
    >>> print(format(pi(1.0), ".6f"))
    3.141593
    >>> 3.141592653589793 in pi(Interval())
    True
    """
    return _apply(x, pi, lambda _: math.pi, lambda _: math.pi, lambda _: mpmath.pi)


@primitive
def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    """
    return _apply(x, exp, math.exp, cmath.exp, mpmath.exp)


@primitive
def log(x, /):
    """Natural logarithm.

    Raises
    ------
    ValueError
        If `x` is a non-positive real number.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    """
    return _apply(x, log, math.log, cmath.log, mpmath.log)


@primitive
def sqrt(x, /):
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    return _apply(x, sqrt, math.sqrt, cmath.sqrt, mpmath.sqrt)


@primitive
def pow(x, y, /):
    """`x` raised to the power `y`.

    Unlike ``x ** y``, the result is differentiable w.r.t. both arguments.

    Examples
    --------
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    linearized = (x, y)

    if type(x) is not type(y) and issubclass(type(y), type(x)):
        linearized = (y, x)

    for z in linearized:
        if fun := getattr(type(z), "_jetdiff_overload_", None):
            if (res := fun(z, pow, x, y)) is not NotImplemented:
                return res

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.power(x, y)

        case (numbers.Real(), numbers.Real()):
            return math.pow(x, y)

        case (numbers.Complex(), numbers.Complex()):
            return complex(x) ** complex(y)

        case _:
            raise UnsupportedOperationError(
                f"pow is not defined for {type(x).__name__} and {type(y).__name__}"
            )


@primitive
def sin(x, /):
    """Sine.

    Examples
    --------
    >>> print(format(sin(1.0), ".6f"))
    0.841471
    """
    return _apply(x, sin, math.sin, cmath.sin, mpmath.sin)


@primitive
def cos(x, /):
    """Cosine.

    Examples
    --------
    >>> print(format(cos(1.0), ".6f"))
    0.540302
    """
    return _apply(x, cos, math.cos, cmath.cos, mpmath.cos)


@primitive
def tan(x, /):
    """Tangent."""
    return _apply(x, tan, math.tan, cmath.tan, mpmath.tan)


@primitive
def asin(x, /):
    """Inverse sine."""
    return _apply(x, asin, math.asin, cmath.asin, mpmath.asin)


@primitive
def acos(x, /):
    """Inverse cosine."""
    return _apply(x, acos, math.acos, cmath.acos, mpmath.acos)


@primitive
def atan(x, /):
    """Inverse tangent.

    Examples
    --------
    >>> print(format(atan(1.0), ".6f"))
    0.785398
    """
    return _apply(x, atan, math.atan, cmath.atan, mpmath.atan)


@primitive
def sinh(x, /):
    """Hyperbolic sine."""
    return _apply(x, sinh, math.sinh, cmath.sinh, mpmath.sinh)


@primitive
def cosh(x, /):
    """Hyperbolic cosine."""
    return _apply(x, cosh, math.cosh, cmath.cosh, mpmath.cosh)


@primitive
def tanh(x, /):
    """Hyperbolic tangent."""
    return _apply(x, tanh, math.tanh, cmath.tanh, mpmath.tanh)


defderiv(pi, lambda x: x * 0)
defderiv(exp, exp)
defderiv(log, lambda x: 1 / x)
defderiv(sqrt, lambda x: 1 / (2 * sqrt(x)))
defderiv(pow, lambda x, y: y * pow(x, y - 1), argnum=0)
defderiv(pow, lambda x, y: log(x) * pow(x, y), argnum=1)
defderiv(sin, cos)
defderiv(cos, lambda x: -sin(x))
defderiv(tan, lambda x: 1 + tan(x) ** 2)
defderiv(asin, lambda x: 1 / sqrt(1 - x**2))
defderiv(acos, lambda x: -1 / sqrt(1 - x**2))
defderiv(atan, lambda x: 1 / (1 + x**2))
defderiv(sinh, cosh)
defderiv(cosh, sinh)
defderiv(tanh, lambda x: 1 - tanh(x) ** 2)
