"""
######################################
Exceptions (:mod:`jetdiff.exceptions`)
######################################

.. autosummary::
    :toctree: generated/

    UnsupportedOperationError
    DimensionMismatchError

"""


class UnsupportedOperationError(TypeError):
    """Raised when an operation without a derivative rule is applied to a jet.

    Being a subclass of :class:`TypeError`, it is also what foreign code such as
    :func:`math.sin` raises when it tries to convert a jet to ``float``.
    """


class DimensionMismatchError(ValueError):
    """Raised when a function and an evaluation point have inconsistent arity."""
