"""
Test suite for partitioned state-space systems and their parallel and
series connections.
"""

import numpy as np
import pytest
import control as ct
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from PSScontrol.partitioned import PartitionedStateSpace, pss_parallel, pss_series
from PSScontrol.errors import PartitionError, SamplingTimeMismatchError, ShapeMismatchError


def dc_gain(sys):
    """Static gain D - C A^-1 B of a realization."""
    return sys.D - sys.C @ np.linalg.solve(sys.A, sys.B)


def freq_resp(sys, w):
    """Frequency response D + C (jwI - A)^-1 B of a realization."""
    n = sys.A.shape[0]
    return sys.D + sys.C @ np.linalg.solve(1j * w * np.eye(n) - sys.A, sys.B)


def random_system(n, m, p, seed):
    """Stable random realization with small feedthrough."""
    rng = np.random.default_rng(seed)
    A = -3.0 * np.eye(n) + 0.3 * rng.standard_normal((n, n))
    B = rng.standard_normal((n, m))
    C = rng.standard_normal((p, n))
    D = 0.3 * rng.standard_normal((p, m))
    return ct.ss(A, B, C, D)


def create_plant(dt=0):
    """2 states, 3 inputs, 3 outputs with distinct entries."""
    A = np.array([[-1.0, 0.5], [0.0, -2.0]])
    B = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    C = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    D = np.arange(9, dtype=float).reshape(3, 3)
    return ct.ss(A, B, C, D, dt)


def create_siso(a, b=1.0, c=1.0, d=0.0, dt=0):
    return PartitionedStateSpace(ct.ss([[a]], [[b]], [[c]], [[d]], dt), 1, 1)


class TestAccessors:
    """Test block accessors of PartitionedStateSpace."""

    def test_stored_fields(self):
        P = create_plant()
        sys = PartitionedStateSpace(P, 2, 1)
        assert sys.P is P
        assert sys.nu1 == 2
        assert sys.ny1 == 1

    def test_blocks(self):
        P = create_plant()
        sys = PartitionedStateSpace(P, 2, 1)

        np.testing.assert_array_equal(sys.A, P.A)
        np.testing.assert_array_equal(sys.B1, P.B[:, :2])
        np.testing.assert_array_equal(sys.B2, P.B[:, 2:])
        np.testing.assert_array_equal(sys.C1, P.C[:1, :])
        np.testing.assert_array_equal(sys.C2, P.C[1:, :])
        np.testing.assert_array_equal(sys.D11, [[0.0, 1.0]])
        np.testing.assert_array_equal(sys.D12, [[2.0]])
        np.testing.assert_array_equal(sys.D21, [[3.0, 4.0], [6.0, 7.0]])
        np.testing.assert_array_equal(sys.D22, [[5.0], [8.0]])

    def test_pass_through(self):
        P = create_plant(dt=0.1)
        sys = PartitionedStateSpace(P, 2, 1)

        np.testing.assert_array_equal(sys.B, P.B)
        np.testing.assert_array_equal(sys.C, P.C)
        np.testing.assert_array_equal(sys.D, P.D)
        assert sys.dt == 0.1
        assert (sys.nstates, sys.ninputs, sys.noutputs) == (2, 3, 3)
        assert (sys.nu2, sys.ny2) == (1, 2)

    @pytest.mark.parametrize("nu1, ny1", [(5, 7), (2, 1), (1, 2)])
    def test_partition_beyond_width(self, nu1, ny1):
        """A partition point past the last signal is rejected."""
        siso = create_siso(-1.0).P
        with pytest.raises(PartitionError):
            PartitionedStateSpace(siso, nu1, ny1)

    def test_full_width_partition(self):
        sys = PartitionedStateSpace(create_plant(), 3, 3)
        assert (sys.nu2, sys.ny2) == (0, 0)
        assert sys.B2.shape == (2, 0)
        assert sys.D22.shape == (0, 0)

    def test_immutable(self):
        sys = PartitionedStateSpace(create_plant(), 2, 1)
        with pytest.raises(AttributeError):
            sys.nu1 = 1
        with pytest.raises(AttributeError):
            sys.B1 = np.zeros((2, 2))
        with pytest.raises(AttributeError):
            sys.extra = 1

    @pytest.mark.parametrize("nu1, ny1", [(-1, 0), (0, -2), (1.5, 1), (True, 1)])
    def test_invalid_partition(self, nu1, ny1):
        with pytest.raises(PartitionError):
            PartitionedStateSpace(create_plant(), nu1, ny1)

    def test_requires_statespace(self):
        with pytest.raises(TypeError):
            PartitionedStateSpace(np.eye(2), 1, 1)

    def test_repr(self):
        text = repr(PartitionedStateSpace(create_plant(), 2, 1))
        assert "PartitionedStateSpace" in text
        assert "inputs=2+1" in text


class TestFromBlocks:
    """Test construction from the nine partitioned blocks."""

    def test_round_trip(self):
        sys = PartitionedStateSpace.from_blocks(
            A=[[-1.0]], B1=[[1.0]], B2=[[2.0, 3.0]],
            C1=[[4.0]], C2=[[5.0]],
            D11=[[0.1]], D12=[[0.2, 0.3]], D21=[[0.4]], D22=[[0.5, 0.6]],
            dt=0.5)

        assert (sys.nu1, sys.ny1) == (1, 1)
        assert sys.dt == 0.5
        np.testing.assert_array_equal(sys.B, [[1.0, 2.0, 3.0]])
        np.testing.assert_array_equal(sys.C, [[4.0], [5.0]])
        np.testing.assert_array_equal(sys.D, [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
        np.testing.assert_array_equal(sys.D12, [[0.2, 0.3]])

    def test_inconsistent_blocks(self):
        with pytest.raises(ShapeMismatchError):
            PartitionedStateSpace.from_blocks(
                A=[[-1.0]], B1=[[1.0]], B2=[[1.0]],
                C1=[[1.0]], C2=[[1.0]],
                D11=[[0.0]], D12=[[0.0], [0.0]], D21=[[0.0]], D22=[[0.0]])


class TestParallel:
    """Test parallel connection of partitioned systems."""

    def test_literal_siso_pair(self):
        s1 = create_siso(-1.0)
        s2 = create_siso(-2.0)
        s3 = s1 + s2

        np.testing.assert_array_equal(s3.A, [[-1.0, 0.0], [0.0, -2.0]])
        np.testing.assert_array_equal(s3.B, [[1.0], [1.0]])
        np.testing.assert_array_equal(s3.C, [[1.0, 1.0]])
        np.testing.assert_array_equal(s3.D11, [[0.0]])
        assert s3.nu1 == s1.nu1 + s2.nu1
        assert s3.ny1 == s1.ny1 + s2.ny1

    def test_siso_pair_keeps_summed_partition(self):
        """Both first-group counts are summed although the input is shared."""
        s3 = create_siso(-1.0) + create_siso(-2.0)
        assert (s3.nu1, s3.ny1) == (2, 2)
        assert s3.B1.shape == (2, 1)
        assert s3.B2.shape == (2, 0)
        assert (s3.nu2, s3.ny2) == (0, 0)

        # The summed partition carries into a series connection
        s4 = create_siso(-3.0) * s3
        assert (s4.nu1, s4.ny1) == (2, 1)
        np.testing.assert_allclose(dc_gain(s4.P), [[0.5]])

    def test_d11_is_summed(self):
        s1 = create_siso(-1.0, d=0.25)
        s2 = create_siso(-2.0, d=0.5)
        s3 = pss_parallel(s1, s2)
        np.testing.assert_allclose(s3.D11, s1.D11 + s2.D11)
        np.testing.assert_allclose(dc_gain(s3.P), dc_gain(s1.P) + dc_gain(s2.P))

    def test_second_groups_are_stacked(self):
        P1 = ct.ss([[-1.0]], [[1.0, 2.0]], [[1.0], [3.0]], [[0.0, 0.1], [0.2, 0.3]])
        P2 = ct.ss([[-2.0]], [[4.0, 5.0]], [[6.0], [7.0]], [[0.4, 0.5], [0.6, 0.7]])
        s1 = PartitionedStateSpace(P1, 1, 1)
        s2 = PartitionedStateSpace(P2, 1, 1)
        s3 = s1 + s2

        np.testing.assert_array_equal(s3.B, [[1.0, 2.0, 0.0], [4.0, 0.0, 5.0]])
        np.testing.assert_array_equal(s3.C, [[1.0, 6.0], [3.0, 0.0], [0.0, 7.0]])
        np.testing.assert_allclose(s3.D, [[0.4, 0.1, 0.5],
                                          [0.2, 0.3, 0.0],
                                          [0.6, 0.0, 0.7]])
        assert (s3.nu1, s3.ny1) == (2, 2)

    def test_shape_mismatch(self):
        s1 = PartitionedStateSpace(create_plant(), 2, 1)
        s2 = create_siso(-1.0)
        with pytest.raises(ShapeMismatchError):
            s1 + s2

    def test_sampling_time(self):
        s3 = create_siso(0.5, dt=0.1) + create_siso(0.2, dt=0.1)
        assert s3.dt == 0.1
        with pytest.raises(SamplingTimeMismatchError):
            create_siso(-1.0) + create_siso(0.5, dt=0.1)

    def test_rejects_other_operands(self):
        with pytest.raises(TypeError):
            create_siso(-1.0) + 1.0


class TestSeries:
    """Test series connection of partitioned systems."""

    def test_literal_siso_pair(self):
        s1 = create_siso(-1.0, b=1.0, c=1.0, d=0.5)
        s2 = create_siso(-2.0, b=1.0, c=2.0, d=3.0)
        s3 = s1 * s2

        np.testing.assert_allclose(s3.A, [[-1.0, 2.0], [0.0, -2.0]])
        np.testing.assert_allclose(s3.B, [[3.0], [1.0]])
        np.testing.assert_allclose(s3.C, [[1.0, 1.0]])
        np.testing.assert_allclose(s3.D, [[1.5]])
        np.testing.assert_allclose(dc_gain(s3.P), [[6.0]])

    def test_partition_bookkeeping(self):
        s1 = PartitionedStateSpace(create_plant(), 2, 1)
        P2 = ct.ss([[-3.0]], [[1.0]], [[1.0], [2.0], [3.0]], [[0.0], [1.0], [0.0]])
        s2 = PartitionedStateSpace(P2, 1, 2)
        s3 = pss_series(s1, s2)

        assert s3.ny1 == s1.ny1
        assert s3.nu1 == s2.nu1
        assert s3.nstates == s1.nstates + s2.nstates
        assert s3.ninputs == s2.nu1 + s1.nu2 + s2.nu2
        assert s3.noutputs == s1.ny1 + s1.ny2 + s2.ny2

    def test_frequency_response_all_groups(self):
        """Every path of the series connection matches the operand responses."""
        # s1: 2 loop + 1 exogenous inputs, 1 loop + 2 exogenous outputs
        s1 = PartitionedStateSpace(random_system(3, 3, 3, seed=1), 2, 1)
        # s2: 1 + 2 inputs, 2 loop + 1 exogenous outputs
        s2 = PartitionedStateSpace(random_system(2, 3, 3, seed=2), 1, 2)
        s3 = pss_series(s1, s2)

        for w in (0.0, 0.7, 3.0):
            G1 = freq_resp(s1.P, w)
            G2 = freq_resp(s2.P, w)
            G1_11, G1_12, G1_21, G1_22 = G1[:1, :2], G1[:1, 2:], G1[1:, :2], G1[1:, 2:]
            G2_11, G2_12, G2_21, G2_22 = G2[:2, :1], G2[:2, 1:], G2[2:, :1], G2[2:, 1:]

            # inputs [u; w1; w2], outputs [y1; z1; z2]
            expected = np.block([
                [G1_11 @ G2_11, G1_12, G1_11 @ G2_12],
                [G1_21 @ G2_11, G1_22, G1_21 @ G2_12],
                [G2_21, np.zeros((1, 1)), G2_22]
            ])
            np.testing.assert_allclose(freq_resp(s3.P, w), expected, atol=1e-10)

    def test_shape_mismatch(self):
        s1 = PartitionedStateSpace(create_plant(), 2, 1)
        s2 = create_siso(-1.0)
        with pytest.raises(ShapeMismatchError):
            s1 * s2

    def test_sampling_time(self):
        s3 = create_siso(0.5, dt=0.1) * create_siso(0.2, dt=0.1)
        assert s3.dt == 0.1
        with pytest.raises(SamplingTimeMismatchError):
            create_siso(-1.0) * create_siso(0.5, dt=0.1)
