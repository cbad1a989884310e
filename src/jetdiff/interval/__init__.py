"""
#################################################
Interval arithmetic (:mod:`jetdiff.interval`)
#################################################

.. currentmodule:: jetdiff.interval

This module provides an enclosure type that can be carried by
:class:`~jetdiff.autodiff.Jet`. Differentiating at an interval yields an interval
enclosing the range of the derivative.

.. autosummary::
    :toctree: generated/

    Interval
    FloatOperator

"""

from .interval import FloatOperator, Interval

__all__ = ["FloatOperator", "Interval"]
