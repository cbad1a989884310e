"""
##########################################
Configuration (:mod:`jetdiff.config`)
##########################################

.. currentmodule:: jetdiff.config

This module holds the settings consulted by the differential operators of
:mod:`jetdiff.autodiff`. Settings live in a :class:`Context` stored per thread
(more precisely, per :mod:`contextvars` context), in the same way as
:mod:`decimal` contexts.

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    setcontext
    localcontext

Examples
--------
>>> from concurrent.futures import ThreadPoolExecutor
>>> from jetdiff.autodiff import gradient
>>> with ThreadPoolExecutor() as pool, localcontext(executor=pool):
...     gradient(lambda x, y: x**2 + x * y, (3.0, 4.0))
(10.0, 3.0)
"""

import contextlib
import contextvars
from concurrent.futures import Executor
from typing import Any, Self


class Context:
    """Settings of the differential operators.

    Parameters
    ----------
    executor : Executor, optional
        Executor to which :func:`~jetdiff.autodiff.gradient` and
        :func:`~jetdiff.autodiff.jacobian` submit their passes. Passes run
        sequentially in the calling thread if this is ``None`` (default).
    check_arity : bool, default=True
        If ``True``, the signature of a function is checked against the length of
        the evaluation point before any pass is run.
    """

    __slots__ = ("_executor", "_check_arity")
    _executor: Executor | None
    _check_arity: bool

    def __init__(self, executor: Executor | None = None, check_arity: bool = True):
        if executor is not None and not isinstance(executor, Executor):
            raise TypeError("executor must be a concurrent.futures.Executor")

        self._executor = executor
        self._check_arity = check_arity

    @property
    def executor(self) -> Executor | None:
        return self._executor

    @property
    def check_arity(self) -> bool:
        return self._check_arity

    def copy(self) -> Self:
        return self.__class__(self._executor, self._check_arity)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(executor={self._executor!r}, "
            f"check_arity={self._check_arity!r})"
        )

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("jetdiff")
_UNSET: Any = object()


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    if not isinstance(ctx, Context):
        raise TypeError

    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    executor: Executor | None = _UNSET,
    check_arity: bool = _UNSET,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Keyword arguments override the corresponding settings of the copy.
    """
    if ctx is None:
        ctx = getcontext()

    if executor is _UNSET:
        executor = ctx.executor

    if check_arity is _UNSET:
        check_arity = ctx.check_arity

    ctx = Context(executor, check_arity)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
