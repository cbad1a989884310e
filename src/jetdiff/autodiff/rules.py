import functools
import logging
import types
from collections.abc import Callable, Mapping
from typing import Any

from jetdiff.autodiff.jet import Jet
from jetdiff.exceptions import UnsupportedOperationError

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, Callable] = {}

# numpy calls a method named after the ufunc on object arrays
_NUMPY_ALIASES = {
    "absolute": "abs",
    "arccos": "acos",
    "arcsin": "asin",
    "arctan": "atan",
    "arccosh": "acosh",
    "arcsinh": "asinh",
    "arctanh": "atanh",
    "power": "pow",
}


def primitive[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Register `fun` as a differentiable function.

    The returned wrapper behaves like `fun` on plain arguments. If some positional
    arguments are jets, it evaluates `fun` on their values and combines the partial
    derivatives registered by :func:`defderiv` according to the chain rule.

    Raises
    ------
    ValueError
        If a primitive with the same name is already registered.

    Examples
    --------
    >>> from jetdiff.autodiff import derivative
    >>> from jetdiff import function as jdf
    >>> @primitive
    ... def softplus(x):
    ...     return jdf.log(1 + jdf.exp(x))
    >>> defderiv(softplus, lambda x: 1 / (1 + jdf.exp(-x)))
    >>> derivative(softplus, 0.0)
    0.5
    """
    name = fun.__name__

    if name in _REGISTRY:
        raise ValueError(f"primitive {name!r} is already registered")

    derivs: dict[int, Callable] = {}

    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        if not any(isinstance(x, Jet) for x in args):
            return fun(*args, **kwargs)

        max_level = max(x.level for x in args if isinstance(x, Jet))
        args_value: list = []
        args_jet: list[tuple[int, Jet]] = []

        for argnum, arg in enumerate(args):
            if not isinstance(arg, Jet) or arg.level < max_level:
                args_value.append(arg)
                continue

            args_value.append(arg.value)
            args_jet.append((argnum, arg))

        tangent: Any = None

        for argnum, arg in args_jet:
            if (rule := derivs.get(argnum)) is None:
                raise UnsupportedOperationError(
                    f"{name} has no derivative rule for argument {argnum}"
                )

            tmp = rule(*args_value, **kwargs) * arg.tangent
            tangent = tmp if tangent is None else tangent + tmp

        return args_jet[0][1]._derive(wrapper(*args_value, **kwargs), tangent)

    wrapper.__dict__["_jetdiff_is_primitive"] = True
    wrapper.__dict__["_jetdiff_derivs"] = derivs
    _REGISTRY[name] = wrapper
    logger.debug("registered primitive %s", name)
    return wrapper  # type: ignore


def defderiv[**P](
    fun: Callable[P, Any], deriv: Callable[P, Any], *, argnum: int = 0
) -> None:
    """Register the partial derivative of the primitive `fun` w.r.t. an argument.

    Parameters
    ----------
    fun : Callable
        Function returned by :func:`primitive`.
    deriv : Callable
        Function taking the same arguments as `fun` and returning the partial
        derivative. It is evaluated on the values of the jets, so it should itself be
        built from primitives for higher derivatives to be available.
    argnum : int, default=0
        Position of the argument.

    Raises
    ------
    ValueError
        If `fun` is not a primitive, or a rule for `argnum` is already registered.
    """
    if "_jetdiff_is_primitive" not in fun.__dict__:
        raise ValueError(f"{fun.__name__} is not a primitive")

    derivs = fun.__dict__["_jetdiff_derivs"]

    if argnum in derivs:
        raise ValueError(f"{fun.__name__} already has a rule for argument {argnum}")

    derivs[argnum] = deriv
    logger.debug("registered derivative of %s w.r.t. argument %d", fun.__name__, argnum)


def lookup(name: str) -> Callable:
    """Return the primitive registered under `name` or a numpy alias of it.

    Raises
    ------
    UnsupportedOperationError
        If no such primitive is registered.
    """
    name = _NUMPY_ALIASES.get(name, name)

    if (fun := _REGISTRY.get(name)) is None:
        raise UnsupportedOperationError(f"no derivative rule is registered for {name}")

    return fun


def registry() -> Mapping[str, Callable]:
    """Return a read-only view of the registered primitives, keyed by name."""
    return types.MappingProxyType(_REGISTRY)


def _has_rule(name: str) -> bool:
    return _NUMPY_ALIASES.get(name, name) in _REGISTRY
