import fractions
import math
import numbers
import sys
from typing import Final, Self

from jetdiff import function as jdf

_MAX: Final = sys.float_info.max
_PI_INF: Final = float.fromhex("0x1.921fb54442d18p+1")
_PI_SUP: Final = float.fromhex("0x1.921fb54442d19p+1")


def _ceil(value: float, exact: fractions.Fraction) -> float:
    return value if fractions.Fraction(value) >= exact else math.nextafter(value, math.inf)


def _floor(value: float, exact: fractions.Fraction) -> float:
    return value if fractions.Fraction(value) <= exact else math.nextafter(value, -math.inf)


def _up(value: float, ulps: int = 2) -> float:
    for _ in range(ulps):
        value = math.nextafter(value, math.inf)

    return value


def _down(value: float, ulps: int = 2) -> float:
    for _ in range(ulps):
        value = math.nextafter(value, -math.inf)

    return value


def _overflow(positive: bool, rounding) -> float:
    if positive:
        return math.inf if rounding is _ceil else _MAX

    return -_MAX if rounding is _ceil else -math.inf


class FloatOperator:
    """Provides arithmetic of floats with directed rounding.

    Results are rounded exactly: the exact value of the operation is computed with
    :class:`fractions.Fraction` whenever the floating-point result is finite.
    """

    __slots__ = ()
    ZERO: Final = 0.0
    ONE: Final = 1.0
    INFINITY: Final = math.inf

    def cadd(self, lhs: float, rhs: float) -> float:
        """Add and round towards positive infinity."""
        res = lhs + rhs

        if not (math.isfinite(lhs) and math.isfinite(rhs)):
            return res

        if math.isinf(res):
            return res if res > 0.0 else -_MAX

        return _ceil(res, fractions.Fraction(lhs) + fractions.Fraction(rhs))

    def fadd(self, lhs: float, rhs: float) -> float:
        """Add and round towards negative infinity."""
        return -self.cadd(-lhs, -rhs)

    def csub(self, lhs: float, rhs: float) -> float:
        """Subtract and round towards positive infinity."""
        return self.cadd(lhs, -rhs)

    def fsub(self, lhs: float, rhs: float) -> float:
        """Subtract and round towards negative infinity."""
        return -self.cadd(-lhs, rhs)

    def cmul(self, lhs: float, rhs: float) -> float:
        """Multiply and round towards positive infinity."""
        if lhs == 0.0 or rhs == 0.0:
            return 0.0

        res = lhs * rhs

        if not (math.isfinite(lhs) and math.isfinite(rhs)):
            return res

        if math.isinf(res):
            return res if res > 0.0 else -_MAX

        return _ceil(res, fractions.Fraction(lhs) * fractions.Fraction(rhs))

    def fmul(self, lhs: float, rhs: float) -> float:
        """Multiply and round towards negative infinity."""
        return -self.cmul(-lhs, rhs)

    def cdiv(self, lhs: float, rhs: float) -> float:
        """Divide and round towards positive infinity."""
        if rhs == 0.0:
            raise ZeroDivisionError("float division by zero")

        if lhs == 0.0:
            return 0.0

        if math.isinf(lhs) and math.isinf(rhs):
            return math.inf

        res = lhs / rhs

        if not (math.isfinite(lhs) and math.isfinite(rhs)):
            return res

        if math.isinf(res):
            return res if res > 0.0 else -_MAX

        return _ceil(res, fractions.Fraction(lhs) / fractions.Fraction(rhs))

    def fdiv(self, lhs: float, rhs: float) -> float:
        """Divide and round towards negative infinity."""
        return -self.cdiv(-lhs, rhs)

    def csqr(self, value: float) -> float:
        """Calculate the square root and round towards positive infinity."""
        res = math.sqrt(value)

        if not math.isfinite(res):
            return res

        if fractions.Fraction(res) ** 2 >= fractions.Fraction(value):
            return res

        return math.nextafter(res, math.inf)

    def fsqr(self, value: float) -> float:
        """Calculate the square root and round towards negative infinity."""
        res = math.sqrt(value)

        if not math.isfinite(res):
            return res

        if fractions.Fraction(res) ** 2 <= fractions.Fraction(value):
            return res

        return math.nextafter(res, -math.inf)


class Interval:
    """Inf-sup type interval with float endpoints.

    Parameters
    ----------
    inf : float | int | str | None, optional
        Infimum of the interval. Integers and strings that are not representable are
        rounded outwards.
    sup : float | int | str | None, optional
        Supremum of the interval (the default is `inf`).

    Attributes
    ----------
    inf : float
    sup : float
    operator : FloatOperator

    Notes
    -----
    Arithmetic is rounded outwards exactly. Elementary functions rely on the
    platform's :mod:`math` library and widen its results by two units in the last
    place, which encloses the true value as long as the library's error stays below
    one unit.

    Examples
    --------
    >>> x = Interval("0.1")
    >>> x.inf < 0.1 <= x.sup or x.inf <= 0.1 < x.sup
    True
    >>> y = Interval(-1, 2) * Interval(3, 4)
    >>> y
    Interval(inf=-4.0, sup=8.0)
    """

    __slots__ = ("inf", "sup")
    inf: float
    sup: float
    operator: Final = FloatOperator()

    def __init__(
        self,
        inf: float | int | str | None = None,
        sup: float | int | str | None = None,
    ):
        if inf is None:
            if sup is None:
                self.inf = self.sup = 0.0
                return

            inf = sup

        self.inf = self._convert(inf, _floor)
        self.sup = self._convert(inf if sup is None else sup, _ceil)

        if math.isnan(self.inf) or math.isnan(self.sup):
            raise ValueError("endpoints must not be NaN")

        if self.inf > self.sup:
            raise ValueError(f"inf={self.inf} is greater than sup={self.sup}")

    @staticmethod
    def _convert(value: float | int | str, rounding) -> float:
        match value:
            case float() | bool():
                return float(value)

            case int() | fractions.Fraction():
                try:
                    res = float(value)
                except OverflowError:
                    return _overflow(value > 0, rounding)

                return rounding(res, fractions.Fraction(value))

            case str():
                res = float(value)

                if math.isnan(res):
                    raise ValueError("endpoints must not be NaN")

                try:
                    exact = fractions.Fraction(value)
                except ValueError:
                    # infinities
                    return res

                if math.isinf(res):
                    return _overflow(res > 0.0, rounding)

                return rounding(res, exact)

            case numbers.Real():
                return float(value)

        raise TypeError(f"cannot convert {type(value).__name__} to an endpoint")

    @classmethod
    def ensure(cls, value: Self | float | int | str) -> Self:
        """Convert `value` to an interval and return its copy."""
        return value.copy() if isinstance(value, cls) else cls(value)

    def copy(self) -> Self:
        """Return a shallow copy of the interval."""
        return self.__class__(self.inf, self.sup)

    def diam(self) -> float:
        """Return an upper bound of the diameter."""
        return self.operator.csub(self.sup, self.inf)

    def width(self) -> float:
        """Alias of :meth:`diam`."""
        return self.diam()

    def hull(self, *args: Self | float | int) -> Self:
        """Return an interval hull."""
        result = self.copy()

        for arg in args:
            result |= arg

        return result

    def interiorcontains(self, other: Self | float | int) -> bool:
        """Return ``True`` if the interior of the interval contains `other`."""
        other = self.ensure(other)
        return self.inf < other.inf and other.sup < self.sup

    def isbounded(self) -> bool:
        """Return ``True`` if both `inf` and `sup` are finite."""
        return math.isfinite(self.inf) and math.isfinite(self.sup)

    def isdisjoint(self, other: Self | float | int) -> bool:
        """Return ``True`` if the interval has no elements in common with `other`."""
        other = self.ensure(other)
        return self.inf > other.sup or self.sup < other.inf

    def issubset(self, other: Self) -> bool:
        """Test whether every element in the interval is in `other`."""
        if type(self) is not type(other):
            return False

        return self.inf >= other.inf and self.sup <= other.sup

    def issuperset(self, other: Self) -> bool:
        """Test whether every element in `other` is in the interval."""
        if type(self) is not type(other):
            return False

        return self.inf <= other.inf and self.sup >= other.sup

    def mag(self) -> float:
        """Return the magnitude ``max(abs(x.inf), abs(x.sup))``."""
        return max(abs(self.inf), abs(self.sup))

    def mid(self) -> float:
        """Return an approximation of the midpoint.

        ``x.mid() in x`` is guaranteed to be ``True`` for any bounded `x`.
        """
        if not self.isbounded():
            if math.isinf(self.inf) and math.isinf(self.sup):
                return 0.0

            return -_MAX if math.isinf(self.inf) else _MAX

        res = 0.5 * self.inf + 0.5 * self.sup
        return min(max(res, self.inf), self.sup)

    def mig(self) -> float:
        """Return the mignitude, zero if the interval contains zero."""
        if self.inf <= 0.0 <= self.sup:
            return 0.0

        return min(abs(self.inf), abs(self.sup))

    def rad(self) -> float:
        """Return an upper bound of the radius."""
        return (self - self.mid()).mag()

    def _jetdiff_overload_(self, fun, *args, **kwargs):
        match fun:
            case jdf.pi:
                return self.__class__(_PI_INF, _PI_SUP)

            case jdf.exp:
                return self.__monotone(math.exp, 0.0, math.inf)

            case jdf.log:
                if self.inf < 0.0:
                    raise ValueError("math domain error")

                if self.sup == 0.0:
                    raise ValueError("math domain error")

                inf = -math.inf if self.inf == 0.0 else _down(math.log(self.inf))
                return self.__class__(inf, _up(math.log(self.sup)))

            case jdf.sqrt:
                if self.inf < 0.0:
                    raise ValueError("math domain error")

                inf = self.operator.fsqr(self.inf)
                return self.__class__(inf, self.operator.csqr(self.sup))

            case jdf.pow:
                x, y = args

                if isinstance(y, int) and not isinstance(y, bool):
                    return self.ensure(x) ** y

                return jdf.exp(jdf.log(self.ensure(x)) * y)

            case jdf.sin:
                return self.__sin(self.inf, self.sup)

            case jdf.cos:
                return self.__cos()

            case jdf.tan:
                return jdf.sin(self) / jdf.cos(self)

            case jdf.atan:
                return self.__monotone(math.atan, -_PI_SUP / 2, _PI_SUP / 2)

            case jdf.asin:
                if self.inf < -1.0 or self.sup > 1.0:
                    raise ValueError("math domain error")

                return self.__monotone(math.asin, -_PI_SUP / 2, _PI_SUP / 2)

            case jdf.acos:
                if self.inf < -1.0 or self.sup > 1.0:
                    raise ValueError("math domain error")

                inf = max(_down(math.acos(self.sup)), 0.0)
                return self.__class__(inf, min(_up(math.acos(self.inf)), _PI_SUP))

            case jdf.sinh:
                return self.__monotone(math.sinh, -math.inf, math.inf)

            case jdf.tanh:
                return self.__monotone(math.tanh, -1.0, 1.0)

            case jdf.cosh:
                lo = self.mig()
                hi = self.mag()
                inf = max(_down(math.cosh(lo)), 1.0) if math.isfinite(lo) else math.inf
                sup = _up(math.cosh(hi)) if math.isfinite(hi) else math.inf
                return self.__class__(inf, sup)

        return NotImplemented

    def __monotone(self, fun, lower: float, upper: float) -> Self:
        inf = max(_down(fun(self.inf)), lower) if math.isfinite(self.inf) else lower
        sup = min(_up(fun(self.sup)), upper) if math.isfinite(self.sup) else upper
        return self.__class__(inf, sup)

    def __sin(self, a: float, b: float) -> Self:
        if not (math.isfinite(a) and math.isfinite(b)) or b - a >= 2 * _PI_INF:
            return self.__class__(-1.0, 1.0)

        inf = max(min(_down(math.sin(a)), _down(math.sin(b))), -1.0)
        sup = min(max(_up(math.sin(a)), _up(math.sin(b))), 1.0)

        # enlarged so that rounding of the extremal points cannot hide them
        eps = 1e-12 * max(1.0, abs(a), abs(b))
        lo, hi = (a - eps) / (2 * _PI_INF), (b + eps) / (2 * _PI_INF)

        if math.ceil(lo - 0.25) <= math.floor(hi - 0.25):
            sup = 1.0

        if math.ceil(lo + 0.25) <= math.floor(hi + 0.25):
            inf = -1.0

        return self.__class__(inf, sup)

    def __cos(self) -> Self:
        a, b = self.inf, self.sup

        if not (math.isfinite(a) and math.isfinite(b)) or b - a >= 2 * _PI_INF:
            return self.__class__(-1.0, 1.0)

        inf = max(min(_down(math.cos(a)), _down(math.cos(b))), -1.0)
        sup = min(max(_up(math.cos(a)), _up(math.cos(b))), 1.0)
        eps = 1e-12 * max(1.0, abs(a), abs(b))
        lo, hi = (a - eps) / (2 * _PI_INF), (b + eps) / (2 * _PI_INF)

        if math.ceil(lo) <= math.floor(hi):
            sup = 1.0

        if math.ceil(lo - 0.5) <= math.floor(hi - 0.5):
            inf = -1.0

        return self.__class__(inf, sup)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inf={self.inf!r}, sup={self.sup!r})"

    def __str__(self) -> str:
        return f"[{self.inf}, {self.sup}]"

    def __format__(self, format_spec: str) -> str:
        return f"[{format(self.inf, format_spec)}, {format(self.sup, format_spec)}]"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return other.inf == self.inf and other.sup == self.sup

    def __contains__(self, item) -> bool:
        match item:
            case Interval():
                return item.issubset(self)

            case numbers.Real():
                return self.__class__(item).issubset(self)

        raise TypeError(f"unsupported type {type(item).__name__}")

    def __add__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        inf = self.operator.fadd(self.inf, rhs.inf)
        return self.__class__(inf, self.operator.cadd(self.sup, rhs.sup))

    def __sub__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        inf = self.operator.fsub(self.inf, rhs.sup)
        return self.__class__(inf, self.operator.csub(self.sup, rhs.inf))

    def __mul__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        fmul = self.operator.fmul
        cmul = self.operator.cmul
        pairs = (
            (self.inf, rhs.inf),
            (self.inf, rhs.sup),
            (self.sup, rhs.inf),
            (self.sup, rhs.sup),
        )
        inf = min(fmul(x, y) for x, y in pairs)
        sup = max(cmul(x, y) for x, y in pairs)
        return self.__class__(inf, sup)

    def __truediv__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        cdiv = self.operator.cdiv
        fdiv = self.operator.fdiv
        INFINITY = self.operator.INFINITY

        if rhs.inf == rhs.sup == 0.0:
            raise ZeroDivisionError("interval division by zero")

        if rhs.inf <= 0.0 <= rhs.sup:
            if self.inf == self.sup == 0.0:
                return self.__class__()

            if rhs.inf != 0.0 and rhs.sup != 0.0:
                return self.__class__(-INFINITY, INFINITY)

            if self.sup < 0.0:
                if rhs.sup == 0.0:
                    return self.__class__(fdiv(self.sup, rhs.inf), INFINITY)

                return self.__class__(-INFINITY, cdiv(self.sup, rhs.sup))

            if self.inf > 0.0:
                if rhs.sup == 0.0:
                    return self.__class__(-INFINITY, cdiv(self.inf, rhs.inf))

                return self.__class__(fdiv(self.inf, rhs.sup), INFINITY)

            return self.__class__(-INFINITY, INFINITY)

        pairs = (
            (self.inf, rhs.inf),
            (self.inf, rhs.sup),
            (self.sup, rhs.inf),
            (self.sup, rhs.sup),
        )
        inf = min(fdiv(x, y) for x, y in pairs)
        sup = max(cdiv(x, y) for x, y in pairs)
        return self.__class__(inf, sup)

    def __pow__(self, rhs: Self | float | int) -> Self:
        if isinstance(rhs, Interval) or (
            isinstance(rhs, numbers.Real) and not isinstance(rhs, int)
        ):
            return jdf.pow(self, rhs)

        if not isinstance(rhs, int):
            return NotImplemented

        if rhs < 0:
            return self.__pow__(-rhs).__rtruediv__(1)

        result = self.__class__(1.0)
        tmp = self.copy()
        is_even = rhs % 2 == 0

        while rhs != 0:
            if rhs % 2 != 0:
                result *= tmp

            rhs //= 2
            tmp *= tmp

        if is_even and self.inf <= 0.0 <= self.sup:
            result.inf = 0.0

        return result

    def __and__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        inf = max(self.inf, rhs.inf)
        sup = min(self.sup, rhs.sup)

        if inf > sup:
            raise ValueError("intersection is empty")

        return self.__class__(inf, sup)

    def __or__(self, rhs: Self | float | int) -> Self:
        if not isinstance(rhs, Interval | numbers.Real):
            return NotImplemented

        rhs = self.ensure(rhs)
        return self.__class__(min(self.inf, rhs.inf), max(self.sup, rhs.sup))

    def __radd__(self, lhs: Self | float | int) -> Self:
        return self.__add__(lhs)

    def __rsub__(self, lhs: Self | float | int) -> Self:
        return self.__neg__().__add__(lhs)

    def __rmul__(self, lhs: Self | float | int) -> Self:
        return self.__mul__(lhs)

    def __rtruediv__(self, lhs: Self | float | int) -> Self:
        if not isinstance(lhs, Interval | numbers.Real):
            return NotImplemented

        return self.ensure(lhs).__truediv__(self)

    def __rand__(self, lhs: Self | float | int) -> Self:
        return self.__and__(lhs)

    def __ror__(self, lhs: Self | float | int) -> Self:
        return self.__or__(lhs)

    def __neg__(self) -> Self:
        return self.__class__(-self.sup, -self.inf)

    def __pos__(self) -> Self:
        return self.copy()

    def __abs__(self) -> Self:
        if self.inf >= 0.0:
            return self.copy()

        if self.sup <= 0.0:
            return -self

        return self.__class__(0.0, max(-self.inf, self.sup))

    def __copy__(self) -> Self:
        return self.copy()
