import logging
import warnings

import numpy as np
import control as ct
from scipy.linalg import LinAlgError, solve, svdvals

from .blkdiag import blkdiag
from .config import InterconnectionConfig, WellPosednessPolicy
from .errors import IllPosedInterconnectionError, ShapeMismatchError
from .partitioned import PartitionedStateSpace
from .sampling import common_dt

logger = logging.getLogger(__name__)


def feedback(s1, s2, config=None):
    """
    Feedback connection of partitioned systems.

    The first output group of s1 drives the first input group of s2 and the
    first output group of s2 is subtracted from the first input group of s1:

        u1 = r - y2,    u2 = y1

    Both first groups are related through D11 only, so the loop is solved
    as a linear system (algebraic loop).

    Parameters
    ----------
    s1 : PartitionedStateSpace
        Forward path
    s2 : PartitionedStateSpace
        Feedback path
    config : InterconnectionConfig, optional
        Well-posedness policy and tolerance

    Returns
    -------
    sys_cl : PartitionedStateSpace
        Closed loop with inputs [r; w1; w2] and outputs [y1; z1; z2],
        nu1 = s2.nu1 and ny1 = s1.ny1

    Raises
    ------
    IllPosedInterconnectionError
        If I + s2.D11*s1.D11 is singular (or, with the RAISE policy, close
        to singular).
    """
    config = config or InterconnectionConfig()
    dt = common_dt(s1, s2)

    p, m = s1.D11.shape
    if s2.D11.shape != (m, p):
        raise ShapeMismatchError(
            f"Feedback loop mismatch: s1.D11 is {s1.D11.shape}, s2.D11 is {s2.D11.shape}, "
            f"expected s2.D11 of shape {(m, p)}")

    n1, n2 = s1.nstates, s2.nstates

    # Loop matrices, sizes m x m and p x p
    M1 = np.eye(m) + s2.D11 @ s1.D11
    M2 = np.eye(p) + s1.D11 @ s2.D11
    _check_well_posed(M1, config)

    X_11 = _solve_loop(M1, np.hstack([-s2.D11 @ s1.C1, -s2.C1]))
    X_21 = _solve_loop(M2, np.hstack([s1.C1, -s1.D11 @ s2.C1]))

    X_12 = _solve_loop(M1, np.hstack([np.eye(m), -s2.D11 @ s1.D12, -s2.D12]))
    X_22 = _solve_loop(M2, np.hstack([s1.D11, s1.D12, -s1.D11 @ s2.D12]))

    A = np.vstack([s1.B1 @ X_11, s2.B1 @ X_21]) + blkdiag(s1.A, s2.A)

    B = np.vstack([s1.B1 @ X_12, s2.B1 @ X_22])
    tmp = blkdiag(s1.B2, s2.B2)
    B[:, B.shape[1] - tmp.shape[1]:] += tmp

    C = np.vstack([
        s1.D11 @ X_11,
        s1.D21 @ X_11,
        s2.D21 @ X_21
    ]) + np.vstack([
        np.hstack([s1.C1, np.zeros((p, n2))]),
        blkdiag(s1.C2, s2.C2)
    ])

    D = np.vstack([
        s1.D11 @ X_12,
        s1.D21 @ X_12,
        s2.D21 @ X_22
    ])
    tmp = np.vstack([
        np.hstack([s1.D12, np.zeros((p, s2.D12.shape[1]))]),
        blkdiag(s1.D22, s2.D22)
    ])
    D[:, D.shape[1] - tmp.shape[1]:] += tmp

    logger.debug("feedback: %d + %d states, %d x %d loop", n1, n2, p, m)
    P = ct.ss(A, B, C, D, dt)
    return PartitionedStateSpace._from_operands(P, s2.nu1, s1.ny1)


def lft(P, K, config=None):
    """
    Lower Linear Fractional Transformation (LFT)

    Given
        P = [P11 P12; P21 P22], K
    returns the closed-loop system: P11 + P12*K*(I - P22*K)^(-1)*P21

    Parameters
    ----------
    P : control.StateSpace
        Generalized plant with partitioned input [w; u] and output [z; y]
    K : control.StateSpace
        Controller from y to u
    config : InterconnectionConfig, optional

    Returns
    -------
    sys_cl : control.StateSpace
        Closed-loop system from w to z
    """
    ny, nu = K.ninputs, K.noutputs
    nw = P.ninputs - nu
    nz = P.noutputs - ny
    if nw < 0 or nz < 0:
        raise ShapeMismatchError(
            f"Controller with {ny} inputs and {nu} outputs does not fit a plant "
            f"with {P.ninputs} inputs and {P.noutputs} outputs")

    # Reorder the plant so that the loop signals (u, y) form the first groups
    B = np.hstack([P.B[:, nw:], P.B[:, :nw]])
    C = np.vstack([P.C[nz:, :], P.C[:nz, :]])
    D = np.block([
        [P.D[nz:, nw:], P.D[nz:, :nw]],
        [P.D[:nz, nw:], P.D[:nz, :nw]]
    ])
    plant = PartitionedStateSpace(ct.ss(P.A, B, C, D, P.dt), nu, ny)

    # Negative feedback through -K gives u = K*y
    sys_cl = feedback(PartitionedStateSpace(-K, ny, nu), plant, config)

    # Drop the reference input and the controller output
    return ct.ss(sys_cl.A, sys_cl.B[:, ny:], sys_cl.C[nu:, :], sys_cl.D[nu:, ny:], sys_cl.dt)


def _check_well_posed(M, config):
    if M.shape[0] == 0 or config.well_posedness is WellPosednessPolicy.IGNORE:
        return

    # Measured against the identity so that a small scalar loop also counts
    s = svdvals(M)
    rcond = s[-1] / max(s[0], 1.0)
    logger.debug("feedback: loop rcond = %.3e", rcond)
    if rcond >= config.rcond_tol:
        return

    msg = (f"Ill-posed feedback loop: I + D2*D1 has smallest singular value ratio "
           f"{rcond:.3e} < {config.rcond_tol:.1e}")
    if config.well_posedness is WellPosednessPolicy.RAISE:
        raise IllPosedInterconnectionError(msg)
    warnings.warn(msg)


def _solve_loop(M, rhs):
    if M.shape[0] == 0:
        return np.zeros(rhs.shape)
    try:
        X = solve(M, rhs)
    except LinAlgError as e:
        raise IllPosedInterconnectionError(f"Singular feedback loop: {e}") from e
    if not np.all(np.isfinite(X)):
        raise IllPosedInterconnectionError("Feedback loop solution is not finite")
    return X


if __name__ == "__main__":

    # Plant 1/(s+1) with unit feedback
    G = PartitionedStateSpace(ct.ss([[-1.0]], [[1.0]], [[1.0]], [[0.0]]), 1, 1)
    H = PartitionedStateSpace(ct.ss([[-10.0]], [[0.0]], [[0.0]], [[1.0]]), 1, 1)

    sys_cl = feedback(G, H)
    print("Closed-loop A:\n", sys_cl.A)
    print("Closed-loop poles:", np.linalg.eigvals(sys_cl.A))
