"""
Tests for stabilizer configuration, presets, validation and YAML loading.
"""

import logging
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml

from stabilizer.control.errors import InvalidConfiguration
from stabilizer.control.pid_controller import PIDGains
from stabilizer.platforms.stabilizer_configs import (
    StabilizerConfig,
    get_config,
    list_configs,
    register_config,
)
from stabilizer.specs.config_loader import StabilizerConfigLoader, load_command_script
from stabilizer.specs.validator import validate_config

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


def test_reference_defaults():
    config = StabilizerConfig()

    assert config.altitude_gains == PIDGains(kp=40.0, ki=3.0, kd=25.0,
                                             integral_min=-10.0, integral_max=10.0)
    assert config.roll_gains.integral_min == -5.0
    assert config.roll_gains.integral_max == 5.0
    assert config.max_tilt_angle == pytest.approx(np.radians(15.0))
    assert config.rise_rate == 2.0
    assert config.telemetry_interval == 0.5
    assert config.gravity_compensation == pytest.approx(9.81)
    assert config.validate() is config


def test_dict_round_trip_uses_degrees():
    config = StabilizerConfig(max_tilt_angle=np.radians(20.0), vehicle_mass=2.0)
    data = config.to_dict()

    assert data["targets"]["max_tilt_deg"] == pytest.approx(20.0)
    assert data["vehicle"]["mass"] == 2.0

    restored = StabilizerConfig.from_dict(data)
    assert restored.max_tilt_angle == pytest.approx(config.max_tilt_angle)
    assert restored.altitude_gains == config.altitude_gains
    assert restored.gravity_compensation == pytest.approx(2.0 * 9.81)


def test_from_dict_partial_keeps_defaults():
    config = StabilizerConfig.from_dict({"roll": {"kp": 3.0}})
    assert config.roll_gains.kp == 3.0
    assert config.roll_gains.kd == StabilizerConfig().roll_gains.kd
    assert config.altitude_gains == StabilizerConfig().altitude_gains


@pytest.mark.parametrize("data", [
    {"yaw": {"kp": 1.0}},
    {"altitude": {"kp": 1.0, "kf": 2.0}},
    {"targets": "high"},
    {"altitude": {"kp": "fast"}},
])
def test_from_dict_rejects_malformed(data):
    with pytest.raises(InvalidConfiguration):
        StabilizerConfig.from_dict(data)


def test_validation_collects_all_errors():
    config = StabilizerConfig(
        altitude_gains=PIDGains(kp=-1.0, ki=0.0, kd=1.0),
        max_tilt_angle=np.radians(95.0),
        vehicle_mass=0.0,
        rise_rate=-1.0,
    )

    result = validate_config(config)

    assert not result.is_valid
    fields = {e.field for e in result.errors}
    assert fields == {"altitude_gains", "max_tilt_angle", "vehicle_mass", "rise_rate"}
    assert "Validation FAILED" in str(result)

    with pytest.raises(InvalidConfiguration) as excinfo:
        config.validate()
    assert "vehicle_mass" in str(excinfo.value)


def test_validation_errors_carry_suggestions():
    config = StabilizerConfig(
        roll_gains=PIDGains(kp=1.0, ki=0.1, kd=0.1, integral_min=1.0, integral_max=5.0),
        max_tilt_angle=np.radians(120.0),
    )

    result = validate_config(config)

    suggestions = {e.field: e.suggestion for e in result.errors}
    assert suggestions["roll_gains"] == "keep gains >= 0 and integral_min < 0 < integral_max"
    assert suggestions["max_tilt_angle"] == "use 10-35 degrees"
    assert "(Suggestion: use 10-35 degrees)" in str(result)


def test_validation_warnings_do_not_fail():
    config = StabilizerConfig(max_tilt_angle=np.radians(60.0), initial_target_altitude=-1.0)
    result = validate_config(config)

    assert result.is_valid
    assert {w.field for w in result.warnings} == {"max_tilt_angle", "initial_target_altitude"}


def test_presets_are_registered_and_independent():
    assert {"reference", "heavy_lift", "agile"} <= set(list_configs())
    for name in list_configs():
        assert get_config(name).validate()

    a = get_config("reference")
    a.vehicle_mass = 42.0
    assert get_config("reference").vehicle_mass == 1.0

    with pytest.raises(ValueError, match="Unknown stabilizer config"):
        get_config("nope")


def test_register_custom_preset():
    register_config("test_custom", StabilizerConfig(rise_rate=0.5))
    assert get_config("test_custom").rise_rate == 0.5


def test_yaml_round_trip():
    loader = StabilizerConfigLoader()
    config = StabilizerConfig(initial_target_altitude=12.0,
                              roll_gains=PIDGains(kp=1.5, ki=0.2, kd=0.3,
                                                  integral_min=-2.0, integral_max=2.0))
    with tempfile.TemporaryDirectory() as tmpdir:
        path = loader.save_to_yaml(config, Path(tmpdir) / "nested" / "config.yaml")
        assert path.exists()

        loaded = loader.load_from_yaml(path)

    assert loaded.initial_target_altitude == 12.0
    assert loaded.roll_gains == config.roll_gains
    assert loaded.max_tilt_angle == pytest.approx(config.max_tilt_angle)


def test_shipped_reference_yaml_matches_defaults():
    loaded = StabilizerConfigLoader().load_from_yaml(CONFIG_DIR / "reference.yaml")
    default = StabilizerConfig()

    assert loaded.altitude_gains == default.altitude_gains
    assert loaded.roll_gains == default.roll_gains
    assert loaded.max_tilt_angle == pytest.approx(default.max_tilt_angle)
    assert loaded.initial_target_altitude == default.initial_target_altitude


def test_loader_errors():
    loader = StabilizerConfigLoader()
    with pytest.raises(FileNotFoundError):
        loader.load_from_yaml("/nonexistent/stabilizer.yaml")

    with tempfile.TemporaryDirectory() as tmpdir:
        bad_yaml = Path(tmpdir) / "bad.yaml"
        bad_yaml.write_text("altitude: [kp: 1\n")
        with pytest.raises(InvalidConfiguration):
            loader.load_from_yaml(bad_yaml)

        not_mapping = Path(tmpdir) / "list.yaml"
        not_mapping.write_text("- 1\n- 2\n")
        with pytest.raises(InvalidConfiguration):
            loader.load_from_yaml(not_mapping)

        invalid = Path(tmpdir) / "invalid.yaml"
        invalid.write_text(yaml.safe_dump({"vehicle": {"mass": -3.0}}))
        with pytest.raises(InvalidConfiguration):
            loader.load_from_yaml(invalid)


def test_loader_logs_warnings(caplog):
    with caplog.at_level(logging.WARNING, logger="stabilizer.specs.config_loader"):
        StabilizerConfigLoader().load_from_dict({"targets": {"max_tilt_deg": 60.0}})
    assert "max_tilt_angle" in caplog.text


def test_load_command_script():
    segments = load_command_script(CONFIG_DIR / "climb_and_roll.yaml")
    assert segments[0]["t"] == 0.0
    assert any(s.get("roll") == 0.5 for s in segments)

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "script.yaml"
        path.write_text("segments: 3\n")
        with pytest.raises(InvalidConfiguration):
            load_command_script(path)
