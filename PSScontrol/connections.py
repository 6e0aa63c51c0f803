"""
Model interconnections on whole systems.

series/parallel forward to the system's own operators, so they work for
PartitionedStateSpace as well as for control.StateSpace and
control.TransferFunction. append, vcat, hcat and hvcat always return a
control.StateSpace built from block-diagonal and stacked matrices, except
when no operand is a system, in which case plain numpy concatenation is
returned.
"""
import logging
from numbers import Number

import numpy as np
import control as ct

from .blkdiag import blkdiag
from .errors import ShapeMismatchError
from .partitioned import PartitionedStateSpace
from .sampling import common_dt

logger = logging.getLogger(__name__)


def series(s1, s2):
    """
    Connect systems in series, equivalent to ``s2*s1`` (s1 feeds s2).
    """
    return s2 * s1


def parallel(s1, s2):
    """
    Connect systems in parallel, equivalent to ``s1 + s2``.
    """
    return s1 + s2


def append(*systems):
    """
    Append systems in block diagonal form.

    Parameters
    ----------
    *systems : control.StateSpace, control.TransferFunction,
        PartitionedStateSpace, numbers or numeric arrays

    Returns
    -------
    sys : control.StateSpace
        System with decoupled inputs, outputs and states
    """
    if not systems:
        raise ValueError("append requires at least one system")
    systems = _promote(systems)
    dt = common_dt(*systems)

    A = blkdiag(*[s.A for s in systems])
    B = blkdiag(*[s.B for s in systems])
    C = blkdiag(*[s.C for s in systems])
    D = blkdiag(*[s.D for s in systems])

    logger.debug("append: %d systems, %d states", len(systems), A.shape[0])
    return ct.ss(A, B, C, D, dt)


def vcat(*systems):
    """
    Stack systems vertically: shared input, stacked outputs.

    All systems must have the same number of inputs and the same sampling
    time. Without any system operand the numeric blocks are stacked with
    ``np.vstack``.
    """
    if not systems:
        raise ValueError("vcat requires at least one operand")
    if not _has_system(systems):
        return np.vstack([np.atleast_2d(s) for s in systems])

    systems = _promote(systems)
    dt = common_dt(*systems)
    nu = systems[0].ninputs
    if not all(s.ninputs == nu for s in systems):
        raise ShapeMismatchError("All systems must have same input dimension")

    A = blkdiag(*[s.A for s in systems])
    B = np.vstack([s.B for s in systems])
    C = blkdiag(*[s.C for s in systems])
    D = np.vstack([s.D for s in systems])

    return ct.ss(A, B, C, D, dt)


def hcat(*systems):
    """
    Stack systems horizontally: stacked inputs, summed shared output.

    All systems must have the same number of outputs and the same sampling
    time. Without any system operand the numeric blocks are concatenated
    with ``np.hstack``.
    """
    if not systems:
        raise ValueError("hcat requires at least one operand")
    if not _has_system(systems):
        return np.hstack([np.atleast_2d(s) for s in systems])

    systems = _promote(systems)
    dt = common_dt(*systems)
    ny = systems[0].noutputs
    if not all(s.noutputs == ny for s in systems):
        raise ShapeMismatchError("All systems must have same output dimension")

    A = blkdiag(*[s.A for s in systems])
    B = blkdiag(*[s.B for s in systems])
    C = np.hstack([s.C for s in systems])
    D = np.hstack([s.D for s in systems])

    return ct.ss(A, B, C, D, dt)


def hvcat(rows, *blocks):
    """
    Block matrix of systems.

    Parameters
    ----------
    rows : tuple of int
        Number of blocks in each block row
    *blocks
        Operands in row-major order

    Returns
    -------
    control.StateSpace, or ndarray if no operand is a system

    Example: ``hvcat((2, 1), G11, G12, G2)`` is ``vcat(hcat(G11, G12), G2)``.
    """
    if sum(rows) != len(blocks) or any(r <= 0 for r in rows):
        raise ValueError(f"Row sizes {tuple(rows)} do not match {len(blocks)} blocks")

    if not _has_system(blocks):
        mats = [np.atleast_2d(b) for b in blocks]
        nested, start = [], 0
        for r in rows:
            nested.append(mats[start:start + r])
            start += r
        return np.block(nested)

    # A static gain must inherit the sampling time of the systems around it
    dt = common_dt(*[b for b in blocks if _is_system(b)])
    blocks = _promote(blocks, dt)
    row_systems, start = [], 0
    for r in rows:
        row_systems.append(hcat(*blocks[start:start + r]))
        start += r
    return vcat(*row_systems)


def _is_system(s):
    return isinstance(s, (ct.StateSpace, ct.TransferFunction, PartitionedStateSpace))


def _has_system(operands):
    return any(_is_system(s) for s in operands)


def _promote(operands, dt=None):
    """Convert every operand to control.StateSpace."""
    if dt is None:
        dts = [s.dt for s in operands if _is_system(s)]
        dt = dts[0] if dts else 0
    return [_as_statespace(s, dt) for s in operands]


def _as_statespace(s, dt):
    if isinstance(s, PartitionedStateSpace):
        return s.P
    if isinstance(s, ct.StateSpace):
        return s
    if isinstance(s, ct.TransferFunction):
        return ct.ss(s)
    if isinstance(s, (Number, np.ndarray, list, tuple)):
        D = np.atleast_2d(np.asarray(s, dtype=float))
        if D.ndim != 2:
            raise ShapeMismatchError(f"Static gain must be a matrix, got shape {D.shape}")
        p, m = D.shape
        return ct.ss(np.zeros((0, 0)), np.zeros((0, m)), np.zeros((p, 0)), D, dt)
    raise TypeError(f"Cannot interconnect operand of type {type(s).__name__}")
