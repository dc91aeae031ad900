"""Tests for configuration loading and validation."""

import pytest
import yaml

from trustdecay.config import ConfigError, SimulationConfig, load_config
from trustdecay.config import defaults


class TestSimulationConfigDefaults:
    """Tests for default values."""

    def test_defaults_match_constants(self):
        """Test dataclass defaults come from the defaults module."""
        config = SimulationConfig()

        assert config.window_size == 20
        assert config.grace_period == 5
        assert config.cold_start_window == 20
        assert config.half_life == 30
        assert config.t_high == 0.75
        assert config.p_low == 0.30
        assert config.num_objects == defaults.NUM_OBJECTS
        assert config.duration == defaults.SIM_DURATION
        assert config.evidence_path == "trustsim_audit.csv"
        assert config.log_changed_only is False

    def test_defaults_validate(self):
        """Test the default configuration is valid."""
        assert SimulationConfig().validate() is not None

    def test_round_trip_dict(self):
        """Test from_dict(to_dict()) preserves values."""
        config = SimulationConfig(num_objects=42, t_mid=0.35)
        restored = SimulationConfig.from_dict(config.to_dict())

        assert restored == config

    def test_from_dict_ignores_unknown_keys(self):
        """Test unknown keys are dropped."""
        config = SimulationConfig.from_dict({"duration": 50, "no_such_key": 1})

        assert config.duration == 50
        assert not hasattr(config, "no_such_key")

    def test_with_overrides_skips_none(self):
        """Test None overrides leave the value unchanged."""
        config = SimulationConfig().with_overrides(duration=None, num_objects=7)

        assert config.duration == defaults.SIM_DURATION
        assert config.num_objects == 7


class TestFromEnv:
    """Tests for environment overlays."""

    def test_reads_prefixed_variables(self):
        """Test TRUSTDECAY_* variables are coerced to field types."""
        environ = {
            "TRUSTDECAY_NUM_OBJECTS": "250",
            "TRUSTDECAY_DECAY_RATE": "0.05",
            "TRUSTDECAY_LOG_CHANGED_ONLY": "yes",
            "TRUSTDECAY_EVIDENCE_PATH": "out/audit.csv",
            "UNRELATED": "1",
        }
        config = SimulationConfig.from_env(environ=environ)

        assert config.num_objects == 250
        assert config.decay_rate == pytest.approx(0.05)
        assert config.log_changed_only is True
        assert config.evidence_path == "out/audit.csv"

    def test_bad_boolean(self):
        """Test unparseable booleans raise ConfigError."""
        with pytest.raises(ConfigError):
            SimulationConfig.from_env(environ={"TRUSTDECAY_LOG_CHANGED_ONLY": "maybe"})

    def test_bad_number(self):
        """Test unparseable numbers raise ConfigError."""
        with pytest.raises(ConfigError):
            SimulationConfig.from_env(environ={"TRUSTDECAY_DURATION": "long"})


class TestYamlLoading:
    """Tests for YAML config files."""

    def test_load_simulation_section(self, tmp_path):
        """Test values are read from the simulation section."""
        path = tmp_path / "trustdecay.yaml"
        path.write_text(yaml.safe_dump({"simulation": {"num_objects": 12, "t_high": 0.8}}))

        config = SimulationConfig.load(path)

        assert config.num_objects == 12
        assert config.t_high == 0.8

    def test_save_then_load(self, tmp_path):
        """Test saved files load back identically."""
        path = tmp_path / "nested" / "config.yaml"
        saved = SimulationConfig(duration=77, log_changed_only=True)
        saved.save(path)

        assert SimulationConfig.load(path) == saved

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError):
            SimulationConfig.load(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigError):
            SimulationConfig.load(path)


class TestValidation:
    """Tests for validate()."""

    @pytest.mark.parametrize("field,value", [
        ("window_size", 0),
        ("duration", 0),
        ("num_objects", -1),
        ("half_life", 0),
        ("grace_period", -1),
        ("t_high", 1.5),
        ("p_low", -0.1),
        ("decay_rate", -0.01),
        ("tick_interval", 2),
    ])
    def test_invalid_values(self, field, value):
        """Test invalid fields fail fast."""
        with pytest.raises(ConfigError):
            SimulationConfig(**{field: value}).validate()

    @pytest.mark.parametrize("field,value", [
        ("duration", "300"),
        ("t_high", "high"),
        ("log_changed_only", "yes"),
        ("num_objects", 10.5),
        ("window_size", True),
    ])
    def test_wrong_types(self, field, value):
        """Test mistyped values raise ConfigError instead of TypeError."""
        with pytest.raises(ConfigError):
            SimulationConfig(**{field: value}).validate()

    def test_wrong_type_from_yaml(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text('simulation:\n  duration: "300"\n')

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_int_accepted_for_float(self):
        assert SimulationConfig(t_high=1).validate().t_high == 1

    def test_threshold_ordering(self):
        """Test mid thresholds may not exceed high thresholds."""
        with pytest.raises(ConfigError):
            SimulationConfig(t_mid=0.8, t_high=0.7).validate()
        with pytest.raises(ConfigError):
            SimulationConfig(r_mid=0.9, r_high=0.7).validate()
        with pytest.raises(ConfigError):
            SimulationConfig(p_low=0.6, p_mid=0.5).validate()

    def test_zero_grace_period_allowed(self):
        """Test a zero grace period is valid."""
        assert SimulationConfig(grace_period=0).validate().grace_period == 0


class TestLoadConfig:
    """Tests for layered loading."""

    def test_priority_order(self, tmp_path):
        """Test overrides beat environment, which beats the file."""
        path = tmp_path / "c.yaml"
        path.write_text(yaml.safe_dump({"simulation": {"num_objects": 10, "duration": 20}}))
        environ = {"TRUSTDECAY_DURATION": "30", "TRUSTDECAY_NUM_OBJECTS": "11"}

        config = load_config(path, environ=environ, num_objects=12)

        assert config.duration == 30
        assert config.num_objects == 12

    def test_invalid_override(self):
        """Test overrides are validated."""
        with pytest.raises(ConfigError):
            load_config(environ={}, duration=-5)
