"""
##########################################
Root finding (:mod:`jetdiff.optimize`)
##########################################

.. currentmodule:: jetdiff.optimize

This module provides root finders driven by forward-mode derivatives. Applied to
intervals, they prove the existence or absence of roots.

Point iteration
===============

.. autosummary::
    :toctree: generated/

    newton

Rigorous root finding
=====================

.. autosummary::
    :toctree: generated/

    allroot_scalar
    krawczyk_scalar

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    AllRootScalarResult
    NewtonResult

"""

from .rootfinding import (
    AllRootScalarResult,
    NewtonResult,
    allroot_scalar,
    krawczyk_scalar,
    newton,
)

__all__ = [
    "AllRootScalarResult",
    "NewtonResult",
    "allroot_scalar",
    "krawczyk_scalar",
    "newton",
]
