"""
Tests for habituative transmitter dynamics.

Test Coverage:
- Depletion under sustained signal, recovery at rest
- Equilibrium epsilon / (epsilon + lambda S + mu S^2)
- Quadratic term makes strong signals deplete disproportionately
- Levels stay in [0, 1]
- Optional depletion history
"""

import pytest
import torch

from lamina.dynamics import TransmitterConfig, TransmitterDynamics, TransmitterState
from lamina.dynamics.transmitter import transmitter_derivative
from lamina.errors import DimensionMismatchError
from tests.utils.test_helpers import assert_pattern_valid, uniform_pattern


@pytest.fixture
def dynamics():
    return TransmitterDynamics(
        TransmitterConfig(epsilon=0.005, linear_depletion=0.1, quadratic_depletion=0.05)
    )


@pytest.mark.unit
class TestTransmitterDerivative:
    def test_full_transmitter_depletes_under_signal(self):
        config = TransmitterConfig()
        derivative = transmitter_derivative(torch.ones(3), torch.full((3,), 0.5), config)
        assert (derivative < 0).all()

    def test_recovery_without_signal(self):
        config = TransmitterConfig()
        derivative = transmitter_derivative(torch.full((3,), 0.4), torch.zeros(3), config)
        assert (derivative > 0).all()
        assert derivative[0].item() == pytest.approx(0.005 * 0.6)

    def test_quadratic_depletion_disproportionate(self):
        config = TransmitterConfig()
        weak = config.depletion_rate(0.3)
        strong = config.depletion_rate(0.9)
        assert strong / weak > 3.0

    def test_linear_only_ratio_equals_signal_ratio(self):
        config = TransmitterConfig.linear()
        assert config.depletion_rate(0.9) / config.depletion_rate(0.3) == pytest.approx(3.0)


@pytest.mark.unit
class TestTransmitterDynamics:
    def test_sustained_signal_strictly_decreases(self, dynamics):
        state = dynamics.initial_state(5).with_signals(uniform_pattern(5, 1.0))
        previous = state.mean_level()
        for _ in range(50):
            state = dynamics.step(state, dt=0.1)
            level = state.mean_level()
            assert level < previous
            assert level > 0.0
            previous = level

    def test_converges_to_equilibrium(self, dynamics):
        state = dynamics.initial_state(3).with_signals(uniform_pattern(3, 0.8))
        state = dynamics.evolve(state, dt=0.5, n_steps=400)
        expected = 0.005 / (0.005 + 0.1 * 0.8 + 0.05 * 0.64)
        assert dynamics.equilibrium(0.8) == pytest.approx(expected)
        assert torch.allclose(state.levels, torch.full((3,), expected), atol=1e-3)
        assert dynamics.has_converged(state, threshold=1e-4)

    def test_equilibrium_monotonically_decreasing(self, dynamics):
        signals = torch.linspace(0.0, 2.0, 21)
        levels = dynamics.equilibrium(signals)
        assert (levels[1:] < levels[:-1]).all()
        assert levels[0].item() == pytest.approx(1.0)

    def test_recovers_at_rest(self, dynamics):
        depleted = TransmitterState(torch.full((2,), 0.2), torch.zeros(2))
        recovered = dynamics.evolve(depleted, dt=1.0, n_steps=100)
        assert (recovered.levels > depleted.levels).all()
        assert (recovered.levels <= 1.0).all()

    def test_levels_bounded_under_huge_steps(self, dynamics):
        state = dynamics.initial_state(4).with_signals(torch.tensor([0.0, 1.0, 5.0, 50.0]))
        for _ in range(20):
            state = dynamics.step(state, dt=10.0)
            assert_pattern_valid(state.levels, lower=0.0, upper=1.0)

    def test_depleted_fraction(self, dynamics):
        state = TransmitterState(torch.tensor([0.1, 0.5, 0.15, 0.9]), torch.zeros(4))
        assert dynamics.depleted_fraction(state) == pytest.approx(0.5)

    def test_history_tracking_bounded(self):
        dynamics = TransmitterDynamics(track_history=True, history_limit=5)
        state = dynamics.initial_state(2).with_signals(torch.ones(2))
        state = dynamics.evolve(state, dt=0.1, n_steps=8)
        history = state.depletion_history
        assert len(history) == 5
        assert list(history) == sorted(history, reverse=True)

    def test_state_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            TransmitterState(torch.ones(2), torch.zeros(3))

    def test_empty_state(self):
        assert TransmitterState.empty().dimension == 0
        assert TransmitterState.empty().mean_level() == 0.0
