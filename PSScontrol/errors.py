"""
Exceptions raised when two systems cannot be interconnected.

Every error derives from ValueError, which is what numpy and python-control
raise for inconsistent system data, so existing ``except ValueError`` blocks
keep catching them.
"""


class InterconnectionError(ValueError):
    """Base class for all interconnection failures."""


class ShapeMismatchError(InterconnectionError):
    """Operand matrices or signal groups have incompatible dimensions."""


class PartitionError(ShapeMismatchError):
    """Invalid partition point for a PartitionedStateSpace."""


class SamplingTimeMismatchError(InterconnectionError):
    """Operands do not share one sampling time."""


class IllPosedInterconnectionError(InterconnectionError):
    """
    The algebraic loop of a feedback connection has no unique solution.

    Raised when (I + D2*D1) is singular or numerically close to it.
    """
