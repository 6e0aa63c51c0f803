"""
A StateSpace model with a partitioning imposed according to

    A  | B1  B2
    ---+--------
    C1 | D11 D12
    C2 | D21 D22

It corresponds to partitioned input and output signals
    u = [u1; u2]
    y = [y1; y2]

Blocks are numpy slices of the wrapped control.StateSpace, recomputed on
every access. Nothing is cached, so the wrapped matrices must not be
modified while a PartitionedStateSpace refers to them.
"""
import logging
from numbers import Integral

import numpy as np
import control as ct

from .blkdiag import blkdiag
from .errors import PartitionError, ShapeMismatchError
from .sampling import common_dt

logger = logging.getLogger(__name__)


class PartitionedStateSpace:
    """
    State-space system with inputs and outputs split into two groups.

    Parameters
    ----------
    P : control.StateSpace
        Underlying realization
    nu1 : int
        Number of inputs in the first group, 0 <= nu1 <= P.ninputs
    ny1 : int
        Number of outputs in the first group, 0 <= ny1 <= P.noutputs

    Raises
    ------
    PartitionError
        If a partition point is negative, not an integer or past the last
        signal.
    """
    __slots__ = ("_P", "_nu1", "_ny1")

    def __init__(self, P, nu1, ny1):
        _check_partition(P, nu1, ny1)
        if nu1 > P.ninputs or ny1 > P.noutputs:
            raise PartitionError(
                f"Partition ({nu1}, {ny1}) exceeds a system with "
                f"{P.ninputs} inputs and {P.noutputs} outputs")
        self._P = P
        self._nu1 = int(nu1)
        self._ny1 = int(ny1)

    @classmethod
    def _from_operands(cls, P, nu1, ny1):
        """
        Result of an interconnection, without the upper bound check.

        Parallel connection sums the first-group counts of both operands
        although they share one first input group, so its nu1/ny1 can exceed
        the signal width. Series and feedback copy a count from an operand
        and carry such a value forward. Blocks are clipped to the width.
        """
        _check_partition(P, nu1, ny1)
        sys = cls.__new__(cls)
        sys._P = P
        sys._nu1 = int(nu1)
        sys._ny1 = int(ny1)
        return sys

    @classmethod
    def from_blocks(cls, A, B1, B2, C1, C2, D11, D12, D21, D22, dt=0):
        """
        Build a partitioned system from its nine blocks.

            x' = A x  + B1 u1  + B2 u2
            y1 = C1 x + D11 u1 + D12 u2
            y2 = C2 x + D21 u1 + D22 u2
        """
        B1, B2, C1, C2 = (np.atleast_2d(np.asarray(M, dtype=float)) for M in (B1, B2, C1, C2))
        D11, D12, D21, D22 = (np.atleast_2d(np.asarray(M, dtype=float)) for M in (D11, D12, D21, D22))
        try:
            B = np.hstack([B1, B2])
            C = np.vstack([C1, C2])
            D = np.block([[D11, D12], [D21, D22]])
        except ValueError as e:
            raise ShapeMismatchError(f"Inconsistent partitioned blocks: {e}") from e
        P = ct.ss(A, B, C, D, dt)
        return cls(P, B1.shape[1], C1.shape[0])

    # Stored fields

    @property
    def P(self):
        return self._P

    @property
    def nu1(self):
        return self._nu1

    @property
    def ny1(self):
        return self._ny1

    # Pass-through to the wrapped realization

    @property
    def A(self):
        return self._P.A

    @property
    def B(self):
        return self._P.B

    @property
    def C(self):
        return self._P.C

    @property
    def D(self):
        return self._P.D

    @property
    def dt(self):
        return self._P.dt

    @property
    def nstates(self):
        return self._P.nstates

    @property
    def ninputs(self):
        return self._P.ninputs

    @property
    def noutputs(self):
        return self._P.noutputs

    @property
    def nu2(self):
        return max(self._P.ninputs - self._nu1, 0)

    @property
    def ny2(self):
        return max(self._P.noutputs - self._ny1, 0)

    # Partitioned blocks

    @property
    def B1(self):
        return self._P.B[:, :self._nu1]

    @property
    def B2(self):
        return self._P.B[:, self._nu1:]

    @property
    def C1(self):
        return self._P.C[:self._ny1, :]

    @property
    def C2(self):
        return self._P.C[self._ny1:, :]

    @property
    def D11(self):
        return self._P.D[:self._ny1, :self._nu1]

    @property
    def D12(self):
        return self._P.D[:self._ny1, self._nu1:]

    @property
    def D21(self):
        return self._P.D[self._ny1:, :self._nu1]

    @property
    def D22(self):
        return self._P.D[self._ny1:, self._nu1:]

    def __add__(self, other):
        if not isinstance(other, PartitionedStateSpace):
            return NotImplemented
        return pss_parallel(self, other)

    def __mul__(self, other):
        if not isinstance(other, PartitionedStateSpace):
            return NotImplemented
        return pss_series(self, other)

    def __repr__(self):
        return (f"PartitionedStateSpace(nstates={self.nstates}, "
                f"inputs={self.nu1}+{self.nu2}, outputs={self.ny1}+{self.ny2}, dt={self.dt!r})")


def pss_parallel(s1, s2):
    """
    Parallel connection of partitioned systems.

    Both systems share the first input group and their first output groups
    are summed; the second groups are stacked.

    Parameters
    ----------
    s1, s2 : PartitionedStateSpace

    Returns
    -------
    PartitionedStateSpace
        with nu1 = s1.nu1 + s2.nu1 and ny1 = s1.ny1 + s2.ny1
    """
    dt = common_dt(s1, s2)
    if s1.D11.shape != s2.D11.shape:
        raise ShapeMismatchError(
            f"Parallel connection needs equal first groups, got D11 {s1.D11.shape} and {s2.D11.shape}")

    A = blkdiag(s1.A, s2.A)

    B = np.hstack([np.vstack([s1.B1, s2.B1]), blkdiag(s1.B2, s2.B2)])

    C = np.vstack([np.hstack([s1.C1, s2.C1]), blkdiag(s1.C2, s2.C2)])

    D = np.vstack([
        np.hstack([s1.D11 + s2.D11, s1.D12, s2.D12]),
        np.hstack([np.vstack([s1.D21, s2.D21]), blkdiag(s1.D22, s2.D22)])
    ])

    logger.debug("parallel: %d + %d states, D %s", s1.nstates, s2.nstates, D.shape)
    P = ct.ss(A, B, C, D, dt)
    return PartitionedStateSpace._from_operands(P, s1.nu1 + s2.nu1, s1.ny1 + s2.ny1)


def pss_series(s1, s2):
    """
    Series connection of partitioned systems, s2 feeding s1.

    The first output group of s2 drives the first input group of s1. The
    second groups of both systems stay exposed.

    Parameters
    ----------
    s1 : PartitionedStateSpace
        Outer system
    s2 : PartitionedStateSpace
        Inner system

    Returns
    -------
    PartitionedStateSpace
        with nu1 = s2.nu1 and ny1 = s1.ny1
    """
    dt = common_dt(s1, s2)
    if s1.B1.shape[1] != s2.C1.shape[0]:
        raise ShapeMismatchError(
            f"Series connection: s1 has {s1.B1.shape[1]} first-group inputs "
            f"but s2 has {s2.C1.shape[0]} first-group outputs")

    n1, n2 = s1.nstates, s2.nstates

    A = np.block([
        [s1.A, s1.B1 @ s2.C1],
        [np.zeros((n2, n1)), s2.A]
    ])

    B = np.block([
        [s1.B1 @ s2.D11, s1.B2, s1.B1 @ s2.D12],
        [s2.B1, np.zeros((n2, s1.B2.shape[1])), s2.B2]
    ])

    C = np.block([
        [s1.C1, s1.D11 @ s2.C1],
        [s1.C2, s1.D21 @ s2.C1],
        [np.zeros((s2.C2.shape[0], n1)), s2.C2]
    ])

    D = np.block([
        [s1.D11 @ s2.D11, s1.D12, s1.D11 @ s2.D12],
        [s1.D21 @ s2.D11, s1.D22, s1.D21 @ s2.D12],
        [s2.D21, np.zeros((s2.D22.shape[0], s1.D22.shape[1])), s2.D22]
    ])

    logger.debug("series: %d + %d states, D %s", n1, n2, D.shape)
    P = ct.ss(A, B, C, D, dt)
    return PartitionedStateSpace._from_operands(P, s2.nu1, s1.ny1)


def _check_partition(P, nu1, ny1):
    if not isinstance(P, ct.StateSpace):
        raise TypeError(f"P must be a control.StateSpace, got {type(P).__name__}")
    for name, value in (("nu1", nu1), ("ny1", ny1)):
        if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
            raise PartitionError(f"{name} must be a non-negative integer, got {value!r}")
