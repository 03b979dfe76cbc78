"""
Tests for declarative config validation and the component config presets.

Test Coverage:
- ValidatorRegistry built-in and registered rules
- Every violation reported in one ConfigValidationError
- Cross-field relations (bounds, chunk sizes, coordinator intervals)
- Presets carry the documented defaults
"""

import pytest
import torch

from lamina.config import BaseConfig, ConfigValidationError, ValidatorRegistry
from lamina.coordination import CoordinatorConfig
from lamina.dynamics import ShuntingConfig, TransmitterConfig
from lamina.errors import ConfigurationError, InvalidArgumentError
from lamina.matching import MatchingConfig, PredictionConfig
from lamina.pathways import PathwayConfig
from lamina.temporal import ChunkingConfig


@pytest.mark.unit
class TestValidatorRegistry:
    """Test predefined validation rules."""

    def test_positive_rejects_zero(self):
        validator = ValidatorRegistry.get_validator("positive")
        validator(0.5, "rate")
        with pytest.raises(ConfigValidationError, match="must be positive"):
            validator(0.0, "rate")

    def test_unit_rate_excludes_zero(self):
        validator = ValidatorRegistry.get_validator("unit_rate")
        validator(1.0, "learning_rate")
        with pytest.raises(ConfigValidationError, match=r"must lie in \(0, 1\]"):
            validator(0.0, "learning_rate")

    def test_registered_rule_is_usable(self):
        @ValidatorRegistry.register("even")
        def even(value, name):
            if value % 2:
                raise ConfigValidationError(f"{name}={value} must be even")

        ValidatorRegistry.get_validator("even")(4, "size")
        with pytest.raises(ConfigValidationError, match="must be even"):
            ValidatorRegistry.get_validator("even")(3, "size")

    def test_bool_is_not_numeric(self):
        validator = ValidatorRegistry.get_validator("non_negative")
        with pytest.raises(ConfigValidationError, match="must be numeric"):
            validator(True, "flag")

    def test_unknown_rule(self):
        with pytest.raises(ValueError, match="Unknown validation rule"):
            ValidatorRegistry.get_validator("banana")


@pytest.mark.unit
class TestBaseConfig:
    def test_torch_dtype_mapping(self):
        assert BaseConfig(dtype="float64").get_torch_dtype() == torch.float64
        assert BaseConfig().get_torch_device() == torch.device("cpu")

    def test_unknown_dtype(self):
        with pytest.raises(ConfigurationError, match="Unknown dtype"):
            BaseConfig(dtype="int8").get_torch_dtype()


@pytest.mark.unit
class TestShuntingConfig:
    def test_defaults(self):
        config = ShuntingConfig()
        assert config.decay_rate == 0.1
        assert config.upper_bound == 1.0
        assert config.lower_bound == 0.0

    def test_standard_preset(self):
        config = ShuntingConfig.standard()
        assert config.lateral_inhibition == 0.5
        assert config.self_excitation == 0.2

    def test_negative_rate_rejected(self):
        with pytest.raises(ConfigValidationError, match="decay_rate"):
            ShuntingConfig(decay_rate=-0.1)

    def test_bounds_relation(self):
        with pytest.raises(ConfigValidationError, match="must exceed"):
            ShuntingConfig(upper_bound=0.5, lower_bound=0.5)

    def test_all_errors_reported_together(self):
        with pytest.raises(ConfigValidationError) as excinfo:
            ShuntingConfig(decay_rate=-1.0, self_excitation=-1.0)
        message = str(excinfo.value)
        assert "decay_rate" in message
        assert "self_excitation" in message

    def test_validation_error_is_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            ShuntingConfig(lateral_inhibition=float("inf"))


@pytest.mark.unit
class TestTransmitterConfig:
    def test_defaults(self):
        config = TransmitterConfig()
        assert config.epsilon == 0.005
        assert config.linear_depletion == 0.1
        assert config.quadratic_depletion == 0.05
        assert config.initial_level == 1.0
        assert config.depletion_threshold == 0.2
        assert config.enable_quadratic

    def test_depletion_rate_quadratic_toggle(self):
        assert TransmitterConfig().depletion_rate(1.0) == pytest.approx(0.15)
        assert TransmitterConfig.linear().depletion_rate(1.0) == pytest.approx(0.1)

    def test_is_depleted(self):
        config = TransmitterConfig()
        assert config.is_depleted(0.1)
        assert not config.is_depleted(0.5)

    def test_initial_level_must_be_probability(self):
        with pytest.raises(ConfigValidationError):
            TransmitterConfig(initial_level=1.5)


@pytest.mark.unit
class TestOtherConfigs:
    def test_pathway_config(self):
        assert PathwayConfig().gain == 1.0
        with pytest.raises(ConfigValidationError, match="gain"):
            PathwayConfig(gain=-1.0)

    def test_tensor_free_configs_carry_no_dtype(self):
        for config in [PathwayConfig(), MatchingConfig(), CoordinatorConfig.standard()]:
            assert not isinstance(config, BaseConfig)
            assert not hasattr(config, "dtype")
        assert not hasattr(MatchingConfig(), "max_search_iterations")

    def test_state_owning_configs_carry_dtype(self):
        for config_cls in [ShuntingConfig, TransmitterConfig, ChunkingConfig, PredictionConfig]:
            config = config_cls(dtype="float64")
            assert config.get_torch_dtype() == torch.float64
        assert not hasattr(BaseConfig(), "seed")

    def test_matching_vigilance_range(self):
        with pytest.raises(ConfigValidationError):
            MatchingConfig(vigilance=1.2)

    def test_prediction_learning_rate_excludes_zero(self):
        with pytest.raises(ConfigValidationError):
            PredictionConfig(learning_rate=0.0)
        assert PredictionConfig().top_down_gain == 0.5

    def test_chunking_presets(self):
        paper = ChunkingConfig.paper_defaults()
        assert (paper.min_chunk_size, paper.max_chunk_size, paper.max_history_size) == (2, 7, 12)
        assert paper.context_weight == 0.3
        fast = ChunkingConfig.fast_chunking()
        assert fast.chunk_formation_threshold < paper.chunk_formation_threshold

    def test_chunking_size_relation(self):
        with pytest.raises(ConfigValidationError, match="min_chunk_size"):
            ChunkingConfig(min_chunk_size=5, max_chunk_size=3)

    def test_chunking_history_may_be_smaller_than_max_chunk(self):
        config = ChunkingConfig(max_history_size=5, max_chunk_size=7)
        assert config.max_history_size == 5

    def test_coordinator_intervals(self):
        assert CoordinatorConfig.standard().chunking_interval == 10
        assert CoordinatorConfig.real_time().slow_interval == 25
        with pytest.raises(ConfigValidationError, match="multiple"):
            CoordinatorConfig(chunking_interval=10, slow_interval=25)
