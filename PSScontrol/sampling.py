"""
Sampling-time bookkeeping shared by all interconnections.
"""
from .errors import SamplingTimeMismatchError


def common_dt(*systems):
    """
    Return the sampling time shared by all systems.

    Parameters
    ----------
    *systems : objects with a ``dt`` attribute
        control.StateSpace, control.TransferFunction or
        PartitionedStateSpace

    Returns
    -------
    dt : float, bool or None
        The common sampling time (0 for continuous time)

    Raises
    ------
    SamplingTimeMismatchError
        If two systems carry different sampling times. A continuous and a
        discrete system never match.
    """
    if not systems:
        raise ValueError("common_dt requires at least one system")

    dt = systems[0].dt
    for sys in systems[1:]:
        if not _same_dt(sys.dt, dt):
            raise SamplingTimeMismatchError(
                f"Sampling time mismatch: {dt!r} vs {sys.dt!r}")
    return dt


def _same_dt(dt1, dt2):
    # True (unspecified period) must not compare equal to a period of 1
    if any(isinstance(dt, bool) or dt is None for dt in (dt1, dt2)):
        return type(dt1) is type(dt2) and dt1 == dt2
    return dt1 == dt2
