import inspect
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Executor
from typing import Any

import numpy as np

from jetdiff.autodiff.jet import Jet, _zero_like
from jetdiff.config import getcontext
from jetdiff.exceptions import DimensionMismatchError

logger = logging.getLogger(__name__)


def _tangent(result: Any, seed: Jet) -> Any:
    if isinstance(result, Jet) and result.level == seed.level:
        return result.tangent

    if isinstance(result, Jet) and result.level > seed.level:
        raise ValueError("result carries a perturbation that was not seeded here")

    # the result does not depend on the seed
    return _zero_like(seed.value)


def _coordinates(point: Any) -> tuple:
    if isinstance(point, np.ndarray):
        if point.ndim != 1:
            raise DimensionMismatchError(
                f"point must be one-dimensional, got {point.ndim} dimensions"
            )

        point = point.tolist()

    if not isinstance(point, Sequence) or isinstance(point, str):
        raise DimensionMismatchError("point must be a sequence of coordinates")

    if len(point) == 0:
        raise DimensionMismatchError("point must have at least one coordinate")

    return tuple(point)


def _check_arity(fun: Callable, n: int) -> None:
    try:
        signature = inspect.signature(fun)
    except (TypeError, ValueError):
        # builtins and some extension functions carry no signature
        return

    try:
        signature.bind(*range(n))
    except TypeError:
        raise DimensionMismatchError(
            f"{getattr(fun, '__name__', fun)!r} cannot take {n} positional arguments"
        ) from None


def _column(fun: Callable, coords: tuple, argnum: int, kwargs: dict) -> Any:
    seed = Jet.variable(coords[argnum])
    args = (*coords[:argnum], seed, *coords[argnum + 1 :])
    result = fun(*args, **kwargs)

    if isinstance(result, Jet) or not isinstance(result, Sequence | np.ndarray):
        return _tangent(result, seed)

    return [_tangent(x, seed) for x in result]


def _columns(
    fun: Callable, point: Any, executor: Executor | None, kwargs: dict
) -> list:
    coords = _coordinates(point)
    ctx = getcontext()

    if ctx.check_arity:
        _check_arity(fun, len(coords))

    if executor is None:
        executor = ctx.executor

    n = len(coords)
    logger.debug("evaluating %d passes (executor=%r)", n, executor)

    if executor is None:
        return [_column(fun, coords, i, kwargs) for i in range(n)]

    futures = [executor.submit(_column, fun, coords, i, kwargs) for i in range(n)]
    return [x.result() for x in futures]


def derivative[T](fun: Callable[..., Any], point: T, /, **kwargs) -> T:
    """Evaluate the derivative of the univariate scalar-valued function at `point`.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It must be written generically over the type of its
        argument, i.e. only use operators and functions of :mod:`jetdiff.function` (or
        other primitives) on it.
    point : T
        Evaluation point. An :class:`~jetdiff.interval.Interval` yields an enclosure of
        the range of the derivative over it.
    **kwargs
        Passed to `fun` unchanged; they are not differentiated.

    Returns
    -------
    T
        Value of the derivative. If the result of `fun` does not depend on its
        argument, this is the zero of ``type(point)``.

    Raises
    ------
    UnsupportedOperationError
        If `fun` applies an operation without a derivative rule to its argument.

    Warnings
    --------
    `fun` must not contain conditional branches on its argument, since jets cannot be
    compared.

    Examples
    --------
    >>> derivative(lambda x: x**2 - 2, 3.0)
    6.0
    >>> derivative(lambda x: 3 * x**5 + 2, 2)
    240

    >>> from jetdiff import Interval
    >>> d = derivative(lambda x: x**2, Interval(1, 2))
    >>> d.inf <= 2 and 4 <= d.sup
    True
    """
    seed = Jet.variable(point)
    return _tangent(fun(seed, **kwargs), seed)


def gradient[T](
    fun: Callable[..., Any],
    point: Sequence[T] | np.ndarray,
    /,
    *,
    executor: Executor | None = None,
    **kwargs,
) -> tuple[T, ...]:
    """Evaluate the gradient of the multivariate scalar-valued function at `point`.

    `fun` is called as ``fun(*point)`` once per coordinate. In the `i`-th pass the
    `i`-th coordinate is seeded and the others are passed as plain constants.

    Parameters
    ----------
    fun : Callable
        Differentiated function.
    point : Sequence | numpy.ndarray
        Evaluation point. Must be non-empty and one-dimensional.
    executor : Executor, optional
        Executor to which the passes are submitted (the default is
        ``getcontext().executor``).
    **kwargs
        Passed to `fun` unchanged.

    Returns
    -------
    tuple
        Partial derivatives, one per coordinate.

    Raises
    ------
    DimensionMismatchError
        If `point` is empty or not one-dimensional, if `fun` cannot take
        ``len(point)`` positional arguments, or if `fun` returns a sequence.

    Examples
    --------
    >>> gradient(lambda x, y: x**2 + x * y, (3, 4))
    (10, 3)
    """
    result = _columns(fun, point, executor, kwargs)

    if any(isinstance(x, list) for x in result):
        raise DimensionMismatchError("fun must be scalar-valued; use jacobian instead")

    return tuple(result)


def jacobian[T](
    fun: Callable[..., Sequence[Any]],
    point: Sequence[T] | np.ndarray,
    /,
    *,
    executor: Executor | None = None,
    **kwargs,
) -> tuple[tuple[T, ...], ...]:
    """Evaluate the Jacobian matrix of the multivariate vector-valued function.

    The matrix is assembled column by column: the `j`-th pass seeds the `j`-th
    coordinate and yields the partial derivatives of every component w.r.t. it.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It must return a sequence (or a one-dimensional
        array) of components.
    point : Sequence | numpy.ndarray
        Evaluation point. Must be non-empty and one-dimensional.
    executor : Executor, optional
        Executor to which the passes are submitted (the default is
        ``getcontext().executor``).
    **kwargs
        Passed to `fun` unchanged.

    Returns
    -------
    tuple[tuple, ...]
        Rows correspond to components of `fun` and columns to coordinates.

    Raises
    ------
    DimensionMismatchError
        If `point` is empty or not one-dimensional, if `fun` cannot take
        ``len(point)`` positional arguments, if `fun` does not return a sequence, or
        if the number of components varies between passes.

    Examples
    --------
    >>> jacobian(lambda x, y: (x * y, x - y), (2.0, 3.0))
    ((3.0, 2.0), (1.0, -1.0))
    """
    columns = _columns(fun, point, executor, kwargs)

    if not all(isinstance(x, list) for x in columns):
        raise DimensionMismatchError("fun must return a sequence of components")

    m = len(columns[0])

    if any(len(x) != m for x in columns):
        raise DimensionMismatchError("number of components varies between passes")

    return tuple(tuple(x[i] for x in columns) for i in range(m))


def deriv[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Return a function that evaluates the derivative of the univariate scalar-valued
    function.

    Examples
    --------
    Derivatives compose, which gives higher-order derivatives.

    >>> ddf = deriv(deriv(lambda x: x**3))
    >>> ddf(2.0)
    12.0
    """

    def result(x, /, **kwargs):
        return derivative(fun, x, **kwargs)

    return result  # type: ignore


def grad[T, **P](fun: Callable[P, T]) -> Callable[P, tuple[T, ...]]:
    """Return a function that evaluates the gradient of the multivariate scalar-valued
    function.

    Examples
    --------
    >>> df = grad(lambda x, y: x**2 + x * y)
    >>> df(3, 4)
    (10, 3)
    """

    def result(*args, **kwargs):
        return gradient(fun, args, **kwargs)

    return result  # type: ignore


def jac[T: tuple, **P](fun: Callable[P, T]) -> Callable[P, tuple[T, ...]]:
    """Return a function that evaluates the Jacobian matrix of the multivariate
    vector-valued function."""

    def result(*args, **kwargs):
        return jacobian(fun, args, **kwargs)

    return result  # type: ignore
