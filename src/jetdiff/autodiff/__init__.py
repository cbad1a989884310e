"""
####################################################
Automatic differentiation (:mod:`jetdiff.autodiff`)
####################################################

.. currentmodule:: jetdiff.autodiff

This module provides forward-mode automatic differentiation.

Differential operators
----------------------

.. autosummary::
    :toctree: generated/

    derivative
    gradient
    jacobian
    deriv
    grad
    jac

Number system containing infinitesimals
---------------------------------------

.. autosummary::
    :toctree: generated/

    Jet

Registering differentiable functions
------------------------------------

.. autosummary::
    :toctree: generated/

    primitive
    defderiv
    lookup
    registry

"""

# rules must be imported before jet
from .rules import defderiv, lookup, primitive, registry
from .jet import Jet
from .autodiff import deriv, derivative, grad, gradient, jac, jacobian

__all__ = [
    "deriv",
    "derivative",
    "grad",
    "gradient",
    "jac",
    "jacobian",
    "Jet",
    "defderiv",
    "lookup",
    "primitive",
    "registry",
]
