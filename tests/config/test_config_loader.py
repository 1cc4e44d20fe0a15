"""Tests for analytics configuration loading and validation.

get_active_config() parses the packaged YAML (or an override path), validates
it and emits HOMEBUILDER_CONFIG_TRACE.
"""
from __future__ import annotations

from decimal import Decimal

import pytest
import yaml

from homebuilder_config import DEFAULT_CONFIG_PATH, get_active_config
from homebuilder_config.loader import compute_checksum, load_yaml_file, parse_analytics_config
from homebuilder_config.schema import AnalyticsConfig, IOConfig, RiskWeightsConfig
from homebuilder_config.validator import validate_configuration


def write_config(tmp_path, data: dict):
    path = tmp_path / "analytics.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultConfig:

    def test_defaults_load(self):
        config = get_active_config()

        assert config.config_id == "homebuilder-analytics"
        assert config.risk_weights == RiskWeightsConfig()
        assert config.placeholders.weather_risk == 20.0
        assert config.placeholders.vendor_cost_efficiency == 80.0
        assert config.capacity.default_floor_area == Decimal("1000")
        assert config.forecast.contingency_factor == Decimal("1.1")
        assert config.io.load_timeout_seconds == 10.0
        assert config.parallel_extractors is True

    def test_checksum_deterministic(self):
        first = get_active_config()
        second = get_active_config()

        assert first.checksum == second.checksum
        assert len(first.checksum) == 64
        assert first.checksum == compute_checksum(load_yaml_file(DEFAULT_CONFIG_PATH))

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_trace_emitted(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "HOMEBUILDER_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["config_version"] == 1
        assert traces[0]["config_path"] == str(DEFAULT_CONFIG_PATH)

    def test_default_instance_is_valid(self):
        assert validate_configuration(AnalyticsConfig()).is_valid


class TestOverridePath:

    def test_custom_path(self, tmp_path):
        path = write_config(tmp_path, {
            "config_id": "regional",
            "version": 3,
            "placeholders": {"weather_risk": 35},
            "io": {"load_timeout_seconds": None, "write_timeout_seconds": 2.5},
            "parallel_extractors": False,
        })

        config = get_active_config(path)

        assert config.config_id == "regional"
        assert config.version == 3
        assert config.placeholders.weather_risk == 35.0
        # Unspecified values fall back to the schema defaults
        assert config.placeholders.supply_chain_risk == 15.0
        assert config.io == IOConfig(load_timeout_seconds=None, write_timeout_seconds=2.5)
        assert config.parallel_extractors is False

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        config = get_active_config(path)

        assert config.risk_weights == RiskWeightsConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "nope.yaml")


class TestInvalidConfig:

    def test_weights_must_sum_to_one(self, tmp_path):
        path = write_config(tmp_path, {"risk_weights": {"budget": 0.5}})

        with pytest.raises(ValueError, match="risk_weights must sum to 1"):
            get_active_config(path)

    def test_negative_weight(self, tmp_path):
        path = write_config(tmp_path, {
            "risk_weights": {"budget": 0.35, "weather": -0.05},
        })

        with pytest.raises(ValueError, match="risk_weights.weather must be non-negative"):
            get_active_config(path)

    def test_non_positive_timeout(self, tmp_path):
        path = write_config(tmp_path, {"io": {"write_timeout_seconds": 0}})

        with pytest.raises(ValueError, match="io.write_timeout_seconds must be positive or null"):
            get_active_config(path)

    def test_placeholder_out_of_range(self, tmp_path):
        path = write_config(tmp_path, {"placeholders": {"weather_risk": 140}})

        with pytest.raises(ValueError, match="placeholders.weather_risk"):
            get_active_config(path)

    def test_contingency_below_one(self, tmp_path):
        path = write_config(tmp_path, {"forecast": {"contingency_factor": "0.9"}})

        with pytest.raises(ValueError, match="contingency_factor must be at least 1"):
            get_active_config(path)

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="Section 'io' must be a mapping"):
            parse_analytics_config({"io": [1, 2]})

    def test_non_numeric_placeholder(self):
        with pytest.raises(ValueError, match="placeholders.weather_risk: expected a number"):
            parse_analytics_config({"placeholders": {"weather_risk": "stormy"}})

    def test_boolean_rejected_as_number(self):
        with pytest.raises(ValueError, match="expected a number"):
            parse_analytics_config({"risk_weights": {"budget": True}})

    @pytest.mark.parametrize("value", ["false", "no", 0, 1, None])
    def test_parallel_extractors_must_be_boolean(self, value):
        with pytest.raises(ValueError, match="parallel_extractors: expected true or false"):
            parse_analytics_config({"parallel_extractors": value})

    def test_quoted_false_in_yaml_rejected(self, tmp_path):
        path = tmp_path / "analytics.yaml"
        path.write_text('parallel_extractors: "false"\n')

        with pytest.raises(ValueError, match="parallel_extractors"):
            get_active_config(path)

    def test_all_errors_reported(self, tmp_path):
        path = write_config(tmp_path, {
            "risk_weights": {"budget": 0.5},
            "io": {"load_timeout_seconds": -1},
        })

        with pytest.raises(ValueError) as exc_info:
            get_active_config(path)

        message = str(exc_info.value)
        assert message.startswith("Configuration validation failed:")
        assert "risk_weights must sum to 1" in message
        assert "io.load_timeout_seconds" in message
