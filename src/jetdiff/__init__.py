from .autodiff import Jet, derivative, gradient, jacobian
from .function import cos, exp, log, pow, sin, sqrt
from .interval import Interval

__all__ = [
    "Jet",
    "derivative",
    "gradient",
    "jacobian",
    "cos",
    "exp",
    "log",
    "pow",
    "sin",
    "sqrt",
    "Interval",
]
