import collections
import dataclasses
import logging
from collections.abc import Callable
from typing import Any, Literal

from jetdiff.autodiff.autodiff import deriv, derivative
from jetdiff.interval.interval import Interval

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class NewtonResult[T]:
    """Output of :func:`newton`.

    Attributes
    ----------
    root : T
        Last iterate.
    iterations : int
        Number of Newton steps taken.
    converged : bool
        ``True`` if the last step was below the tolerance.
    """

    root: T
    iterations: int
    converged: bool


@dataclasses.dataclass(frozen=True, slots=True)
class AllRootScalarResult:
    """Output of :func:`allroot_scalar`.

    Attributes
    ----------
    exists : list[Interval]
        Intervals in which at least one root exists.
    unique : list[Interval]
        Intervals in which exactly one root exists.
    unknown : list[Interval]
        Intervals in which the existence of roots could not be verified.
    """

    exists: list[Interval] = dataclasses.field(default_factory=list)
    unique: list[Interval] = dataclasses.field(default_factory=list)
    unknown: list[Interval] = dataclasses.field(default_factory=list)


def newton[T](
    fun: Callable[[Any], Any],
    x0: T,
    *,
    fprime: Callable[[Any], Any] | None = None,
    tol: float = 1e-12,
    max_iter: int = 50,
) -> NewtonResult[T]:
    """Find a root of the univariate scalar-valued function by Newton's method.

    Parameters
    ----------
    fun : Callable
        Function to find a root of.
    x0 : T
        Initial guess.
    fprime : Callable, optional
        Derivative of `fun` (the default is ``deriv(fun)``).
    tol : float, default=1e-12
        Iteration stops once ``abs(step) <= tol * max(1, abs(x))``.
    max_iter : int, default=50
        Maximum number of iterations.

    Returns
    -------
    NewtonResult
        If the derivative vanishes at an iterate, the iteration stops there with
        ``converged=False``.

    Examples
    --------
    >>> r = newton(lambda x: x**2 - 2, 1.0)
    >>> r.converged, round(r.root, 12)
    (True, 1.414213562373)
    """
    if max_iter <= 0:
        raise ValueError("max_iter must be positive")

    if tol <= 0:
        raise ValueError("tol must be positive")

    if fprime is None:
        fprime = deriv(fun)

    x = x0

    for i in range(1, max_iter + 1):
        d = fprime(x)

        if d == 0:
            logger.debug("derivative vanished at %r after %d iterations", x, i - 1)
            return NewtonResult(x, i - 1, False)

        step = fun(x) / d
        x = x - step
        logger.debug("iteration %d: x=%r, step=%r", i, x, step)

        if abs(step) <= tol * max(1.0, abs(x)):
            return NewtonResult(x, i, True)

    return NewtonResult(x, max_iter, False)


def allroot_scalar(
    fun: Callable[[Any], Any],
    domain: Interval,
    fprime: Callable[[Any], Any] | None = None,
    unique: bool = False,
    max_iter: int = 16,
) -> AllRootScalarResult:
    """Find all roots of univariate scalar-valued function.

    `domain` is split in halves, breadth first, until :func:`krawczyk_scalar` decides
    each piece. Pieces proven root-free are dropped, and pieces still undecided after
    `max_iter` generations are reported as unknown.

    Parameters
    ----------
    fun : Callable
        Function to find a root of.
    domain : Interval
        Interval for which roots are searched.
    fprime : Callable, optional
        Derivative of `fun` (the default is to differentiate `fun` with jets).
    unique : bool, default=False
        If `unique` is ``True``, a piece known only to contain a root keeps being split
        until uniqueness is proven or the generations run out.
    max_iter : int, default=16
        Maximum number of generations.

    Returns
    -------
    AllRootScalarResult

    Warnings
    --------
    `fun` must be a :math:`C^1`-function on `domain`. Furthermore, `fun` must not
    contain conditional branches.

    See Also
    --------
    krawczyk_scalar, jetdiff.autodiff.derivative

    Examples
    --------
    >>> from jetdiff import function as jdf
    >>> r = allroot_scalar(lambda x: x**3 - 2 * x, Interval(-2, 3), unique=True)
    >>> len(r.unique)
    3
    >>> root_max = max(r.unique, key=lambda x: x.sup)
    >>> root_max.issuperset(jdf.sqrt(Interval(2)))
    True
    """
    if not isinstance(domain, Interval):
        raise TypeError("domain must be an Interval")

    if max_iter <= 0:
        raise ValueError("max_iter must be positive")

    result = AllRootScalarResult()
    pending = collections.deque([(domain, 1)])

    while pending:
        x, generation = pending.popleft()
        status, enclosure = krawczyk_scalar(fun, x, fprime)
        final = generation == max_iter
        logger.debug("generation %d: %s on %s", generation, status, x)

        match status:
            case "UNIQUE":
                result.unique.append(enclosure)  # type: ignore

            case "NOTEXISTS":
                pass

            case "EXISTS" if final or not unique:
                result.exists.append(enclosure)  # type: ignore

            case "UNKNOWN" if final:
                result.unknown.append(x)

            case _:
                pending.extend((half, generation + 1) for half in _bisect(x))

    return result


def _bisect(x: Interval) -> tuple[Interval, Interval]:
    m = x.mid()
    return x.__class__(x.inf, m), x.__class__(m, x.sup)


def _slope(fun: Callable[[Any], Any], x: Interval, fprime: Any) -> Interval:
    match fprime:
        case None:
            slope = derivative(fun, x)

        case Interval():
            slope = fprime

        case _ if callable(fprime):
            slope = fprime(x)

        case _:
            raise TypeError("fprime must be callable or an Interval")

    if not isinstance(slope, Interval):
        raise TypeError("derivative must be enclosed by an Interval")

    return slope


type _TestResult[T] = (
    tuple[Literal["EXISTS"], T]
    | tuple[Literal["NOTEXISTS"], None]
    | tuple[Literal["UNIQUE"], T]
    | tuple[Literal["UNKNOWN"], None]
)


def krawczyk_scalar(
    fun: Callable[[Any], Any],
    x: Interval,
    fprime: Callable[[Any], Any] | Interval | None = None,
) -> _TestResult[Interval]:
    r"""Apply the Krawczyk test to the univariate scalar-valued function.

    With :math:`c` the midpoint of :math:`X` and :math:`m` the midpoint of an
    enclosure :math:`F'` of the derivative over :math:`X`, the test evaluates

    .. math::

        K(X) = c - \frac{f(c)}{m} + \left(1 - \frac{F'}{m}\right)(X - c)

    and compares it with :math:`X`.

    Parameters
    ----------
    fun : Callable
        Function to find a root of.
    x : Interval
        Candidate set for which a root is expected to exist.
    fprime : Callable | Interval, optional
        Derivative of `fun`, or an enclosure of its range over `x` (the default is
        ``derivative(fun, x)``).

    Returns
    -------
    r0 : Literal["EXISTS", "NOTEXISTS", "UNIQUE", "UNKNOWN"]
    r1 : Interval | None
        If `r0` is ``"EXISTS"`` or ``"UNIQUE"``, `r1` is the set containing the root;
        otherwise, `r1` is ``None``.

    Warnings
    --------
    `fun` must be a :math:`C^1`-function on `x`. Furthermore, `fun` must not contain
    conditional branches.

    Examples
    --------
    >>> r0, r1 = krawczyk_scalar(lambda x: x**2 - 2, Interval(1, 2))
    >>> r0
    'UNIQUE'
    >>> 1.4142135623730951 in r1
    True
    """
    if not isinstance(x, Interval):
        raise TypeError("x must be an Interval")

    slope = _slope(fun, x, fprime)
    center = x.__class__(x.mid())

    if not x.interiorcontains(center) or (m := slope.mid()) == 0.0:
        return ("UNKNOWN", None)

    image = center - fun(center) / m + (1 - slope / m) * (x - center)

    if x.interiorcontains(image):
        return ("UNIQUE", image)

    if x.issuperset(image):
        return ("EXISTS", image)

    if x.isdisjoint(image):
        return ("NOTEXISTS", None)

    return ("UNKNOWN", None)
