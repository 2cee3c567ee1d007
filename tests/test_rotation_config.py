"""Tests for rotation configuration objects and YAML loading."""

from pathlib import Path

import pytest

from logroll.config.rotation_config import (
    RotationConfig,
    RotationConfigError,
    build_policy,
    load_rotation_config,
    open_rolling_log,
)
from logroll.policies.date_rolling import DateRollingPolicy
from logroll.policies.size_rolling import SizeRollingPolicy


class TestRotationConfig:
    def test_defaults_to_daily(self, log_path):
        config = RotationConfig(path=log_path)
        assert config.roll == "daily"
        assert config.max_size is None
        assert config.buffer_size == 0

    def test_roll_is_normalised(self, log_path):
        assert RotationConfig(path=log_path, roll=" Monthly ").roll == "monthly"

    def test_rejects_roll_and_max_size_together(self, log_path):
        with pytest.raises(RotationConfigError, match="both roll and max_size"):
            RotationConfig(path=log_path, roll="daily", max_size="10M")

    def test_rejects_unknown_roll(self, log_path):
        with pytest.raises(RotationConfigError, match="Invalid roll"):
            RotationConfig(path=log_path, roll="hourly")

    def test_rejects_bad_max_size(self, log_path):
        with pytest.raises(RotationConfigError, match="Invalid max_size"):
            RotationConfig(path=log_path, max_size="lots")

    def test_rejects_negative_buffer(self, log_path):
        with pytest.raises(RotationConfigError, match="buffer_size"):
            RotationConfig(path=log_path, buffer_size=-1)

    def test_config_errors_are_value_errors(self, log_path):
        with pytest.raises(ValueError):
            RotationConfig(path=log_path, roll="yearly")

    def test_from_dict_resolves_relative_path(self, tmp_path):
        config = RotationConfig.from_dict({"path": "logs/app.log", "max_size": "1M"}, base_dir=tmp_path)
        assert config.path == tmp_path / "logs" / "app.log"
        assert config.max_size == "1M"
        assert config.roll is None

    def test_from_dict_requires_path(self):
        with pytest.raises(RotationConfigError, match="requires a path"):
            RotationConfig.from_dict({"roll": "daily"})

    def test_to_dict_omits_unset_fields(self, log_path):
        data = RotationConfig(path=log_path, roll="weekly", buffer_size=4).to_dict()
        assert data == {"path": str(log_path), "roll": "weekly", "buffer_size": 4}

    def test_build_policy_picks_variant(self, log_path):
        assert isinstance(RotationConfig(path=log_path, roll="weekly").build_policy(), DateRollingPolicy)
        policy = RotationConfig(path=log_path, max_size=2048).build_policy()
        assert isinstance(policy, SizeRollingPolicy)
        assert policy.max_size == 2048


def test_build_policy_errors(log_path):
    with pytest.raises(RotationConfigError):
        build_policy(str(log_path), roll="daily", max_size=10)
    with pytest.raises(RotationConfigError):
        build_policy(str(log_path), roll="fortnightly")
    with pytest.raises(RotationConfigError):
        build_policy(str(log_path), max_size="huge")


class TestLoadRotationConfig:
    def test_loads_yaml(self, tmp_path):
        config_file = tmp_path / "logroll.yaml"
        config_file.write_text(
            "path: logs/service.log\nroll: weekly\nbuffer_size: 5\nencoding: latin-1\n",
            encoding="utf-8",
        )
        config = load_rotation_config(config_file)
        assert config.path == tmp_path / "logs" / "service.log"
        assert config.roll == "weekly"
        assert config.buffer_size == 5
        assert config.encoding == "latin-1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RotationConfigError, match="not found"):
            load_rotation_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("path: [unclosed\n", encoding="utf-8")
        with pytest.raises(RotationConfigError, match="Invalid YAML"):
            load_rotation_config(config_file)

    def test_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(RotationConfigError, match="mapping"):
            load_rotation_config(config_file)


def test_open_rolling_log_builds_working_writer(tmp_path):
    config = RotationConfig(path=tmp_path / "out" / "app.log", max_size=16, buffer_size=0)
    with open_rolling_log(config) as writer:
        writer.write("0123456789")
        writer.write("0123456789")
        writer.write("after roll")

    log = tmp_path / "out" / "app.log"
    assert Path(f"{log}.1").read_text(encoding="utf-8") == "0123456789\n0123456789\n"
    assert log.read_text(encoding="utf-8") == "after roll\n"
