"""
##############################
Typing (:mod:`jetdiff.typing`)
##############################

This module provides the bound on the field type carried by
:class:`~jetdiff.autodiff.Jet`.

.. autoclass:: Field
    :no-members:

"""

from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class Field(Protocol):
    """Operator set a value must provide to be carried by a jet.

    The propagation rules of :class:`~jetdiff.autodiff.Jet` only use the four
    arithmetic operations (mixed with integers on either side), negation and
    integer powers. ``int``, ``float``, ``complex``, :class:`fractions.Fraction`,
    numpy and :mod:`mpmath` scalars, :class:`~jetdiff.interval.Interval` and
    :class:`~jetdiff.autodiff.Jet` itself satisfy it.

    Examples
    --------
    >>> isinstance(1.5, Field)
    True
    >>> isinstance("1.5", Field)
    False
    """

    def __add__(self, rhs: Self | int, /) -> Self: ...

    def __sub__(self, rhs: Self | int, /) -> Self: ...

    def __mul__(self, rhs: Self | int, /) -> Self: ...

    def __truediv__(self, rhs: Self | int, /) -> Self: ...

    def __pow__(self, rhs: int, /) -> Self: ...

    def __rsub__(self, lhs: Self | int, /) -> Self: ...

    def __rtruediv__(self, lhs: Self | int, /) -> Self: ...

    def __neg__(self) -> Self: ...
