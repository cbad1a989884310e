import threading
from collections.abc import Mapping, Sequence, Set
from typing import Any, Self

import numpy as np

from jetdiff.autodiff import rules
from jetdiff.exceptions import UnsupportedOperationError
from jetdiff.typing import Field

_lock = threading.Lock()
_top = 0


def _level(value: object) -> int:
    return value.level if isinstance(value, Jet) else 0


def _observe(level: int) -> None:
    global _top

    with _lock:
        _top = max(_top, level)


def _fresh_level() -> int:
    global _top

    with _lock:
        _top += 1
        return _top


def _zero_like(value: Any) -> Any:
    if isinstance(value, Jet):
        return _zero_like(value._value)

    try:
        return type(value)(0)
    except (TypeError, ValueError):
        return value * 0


def _unsupported(name: str):
    def method(self, *args):
        raise UnsupportedOperationError(f"{name} is not defined for {type(self).__name__}")

    method.__name__ = name
    return method


class Jet[T: Field]:
    r"""Dual number carrying a value and its first derivative.

    Parameters
    ----------
    value : T
        Primal value.
    tangent : T, optional
        Derivative. The default is the zero of ``type(value)``, which makes the jet a
        constant.

    Attributes
    ----------
    value : T
    tangent : T
    level : int

    Notes
    -----
    Instances behave like elements of :math:`T[\varepsilon]/(\varepsilon^2)`. Jets are
    immutable; every operation returns a new jet.

    Operands that are not jets, or jets of a lower `level`, are treated as constants,
    i.e. as if they were lifted to ``Jet(x)``. A jet built by the constructor is one
    level above its components. :meth:`variable` instead opens a fresh level above
    every jet created so far, so that a seed never shares its perturbation with a jet
    captured from an enclosing differentiation.

    Ordering comparisons, ``//``, ``%``, truth testing and conversion to built-in
    numbers raise :class:`~jetdiff.exceptions.UnsupportedOperationError`, since they
    have no derivative.

    Examples
    --------
    >>> x = Jet(3.0, 1.0)
    >>> x**2 - 2
    Jet(value=7.0, tangent=6.0)
    >>> (x + 2).tangent
    1.0
    >>> Jet(5).tangent
    0
    """

    __slots__ = ("_value", "_tangent", "_level")
    _value: T
    _tangent: T
    _level: int

    def __init__(self, value: T, tangent: T | None = None):
        if not isinstance(value, Field):
            raise TypeError(f"{type(value).__name__} cannot be carried by a jet")

        if tangent is None:
            tangent = _zero_like(value)

        self._value = value
        self._tangent = tangent
        self._level = max(_level(value), _level(tangent)) + 1
        _observe(self._level)

    @classmethod
    def constant(cls, value: T) -> Self:
        """Lift `value` to a jet with zero tangent."""
        return cls(value)

    @classmethod
    def variable(cls, value: T) -> Self:
        """Return a jet seeded with tangent one, i.e. the identity at `value`.

        The seed gets a level of its own, higher than that of any existing jet.
        """
        seed = cls(value, _zero_like(value) + 1)
        seed._level = _fresh_level()
        return seed

    @classmethod
    def lift(cls, value: Self | T) -> Self:
        """Return `value` itself if it is a jet, otherwise lift it to a constant."""
        return value if isinstance(value, cls) else cls.constant(value)

    @property
    def value(self) -> T:
        return self._value

    @property
    def tangent(self) -> T:
        return self._tangent

    @property
    def level(self) -> int:
        return self._level

    def _derive(self, value: T, tangent: T) -> Self:
        # same perturbation as self
        result = object.__new__(self.__class__)
        result._value = value
        result._tangent = tangent
        result._level = self._level
        return result

    def _is_acceptable(self, value: object) -> bool:
        return not isinstance(value, np.ndarray | Sequence | Mapping | Set)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self._value!r}, tangent={self._tangent!r})"

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self._value}, tangent={self._tangent})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return other._value == self._value and other._tangent == self._tangent  # type: ignore

    def __getattr__(self, name: str):
        if name.startswith("_") or not rules._has_rule(name):
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )

        fun = rules.lookup(name)
        return lambda: fun(self)

    def __add__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, Jet) or self._level > rhs._level:
            return self._derive(self._value + rhs, self._tangent)

        if self._level < rhs._level:
            return rhs.__radd__(self)

        return self._derive(self._value + rhs._value, self._tangent + rhs._tangent)

    def __sub__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, Jet) or self._level > rhs._level:
            return self._derive(self._value - rhs, self._tangent)

        if self._level < rhs._level:
            return rhs.__rsub__(self)

        return self._derive(self._value - rhs._value, self._tangent - rhs._tangent)

    def __mul__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, Jet) or self._level > rhs._level:
            return self._derive(self._value * rhs, self._tangent * rhs)

        if self._level < rhs._level:
            return rhs.__rmul__(self)

        tangent = self._tangent * rhs._value + self._value * rhs._tangent
        return self._derive(self._value * rhs._value, tangent)

    def __truediv__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, Jet) or self._level > rhs._level:
            return self._derive(self._value / rhs, self._tangent / rhs)

        if self._level < rhs._level:
            return rhs.__rtruediv__(self)

        value = self._value / rhs._value
        s = rhs._value**2
        tangent = (self._tangent * rhs._value - self._value * rhs._tangent) / s
        return self._derive(value, tangent)

    def __pow__(self, rhs: Self | T | int) -> Self:
        if isinstance(rhs, Jet) and rhs._level >= self._level:
            return rules.lookup("pow")(self, rhs)

        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, Jet) and rhs == 0:
            return self._derive(self._value**rhs, _zero_like(self._tangent))

        tangent = rhs * self._value ** (rhs - 1) * self._tangent
        return self._derive(self._value**rhs, tangent)

    def __neg__(self) -> Self:
        return self._derive(-self._value, -self._tangent)

    def __pos__(self) -> Self:
        return self._derive(+self._value, +self._tangent)

    def __abs__(self) -> Self:
        return rules.lookup("abs")(self)

    def __radd__(self, lhs: Self | T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self._derive(lhs + self._value, self._tangent)

    def __rsub__(self, lhs: Self | T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self._derive(lhs - self._value, -self._tangent)

    def __rmul__(self, lhs: Self | T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self._derive(lhs * self._value, lhs * self._tangent)

    def __rtruediv__(self, lhs: Self | T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        s = self._value**2
        return self._derive(lhs / self._value, -lhs * self._tangent / s)

    def __rpow__(self, lhs: T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return rules.lookup("pow")(lhs, self)

    __lt__ = _unsupported("__lt__")
    __le__ = _unsupported("__le__")
    __gt__ = _unsupported("__gt__")
    __ge__ = _unsupported("__ge__")
    __floordiv__ = _unsupported("__floordiv__")
    __rfloordiv__ = _unsupported("__rfloordiv__")
    __mod__ = _unsupported("__mod__")
    __rmod__ = _unsupported("__rmod__")
    __divmod__ = _unsupported("__divmod__")
    __rdivmod__ = _unsupported("__rdivmod__")
    __bool__ = _unsupported("__bool__")
    __float__ = _unsupported("__float__")
    __int__ = _unsupported("__int__")
    __complex__ = _unsupported("__complex__")
