"""
Tests for config/settings.py
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from config.settings import DEFAULT_OTLP_ENDPOINT, DEFAULT_SEED_PATH, Settings, load_seed_orders

ENV_VARS = (
    "PORT", "LOG_LEVEL", "OTEL_SERVICE_NAME", "DEPLOYMENT_ENVIRONMENT",
    "FLASK_ENV", "SERVICE_VERSION", "OTEL_EXPORTER_OTLP_ENDPOINT", "SEED_ORDERS_PATH",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsFromEnv:
    def test_defaults(self, clean_env):
        s = Settings.from_env()
        assert s.port == 8080
        assert s.log_level == "info"
        assert s.service_name == "order-service"
        assert s.environment == "development"
        assert s.otlp_endpoint == DEFAULT_OTLP_ENDPOINT
        assert s.seed_path == DEFAULT_SEED_PATH

    def test_overrides(self, clean_env):
        clean_env.setenv("PORT", "9090")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("OTEL_SERVICE_NAME", "orders-canary")
        clean_env.setenv("DEPLOYMENT_ENVIRONMENT", "staging")
        clean_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318/v1/traces")
        s = Settings.from_env()
        assert s.port == 9090
        assert s.log_level == "debug"
        assert s.service_name == "orders-canary"
        assert s.environment == "staging"
        assert s.otlp_endpoint == "http://collector:4318/v1/traces"

    def test_flask_env_fallback(self, clean_env):
        clean_env.setenv("FLASK_ENV", "production")
        assert Settings.from_env().environment == "production"

    def test_invalid_port_raises(self, clean_env):
        clean_env.setenv("PORT", "eighty")
        with pytest.raises(ValueError, match="PORT"):
            Settings.from_env()


class TestSeedOrders:
    def test_bundled_seed_file(self):
        orders = load_seed_orders(DEFAULT_SEED_PATH)
        assert [o["item"] for o in orders] == ["widget-pro", "widget-lite", "sensor-kit"]

    def test_custom_seed_file(self, tmp_path: Path):
        p = tmp_path / "seed.yaml"
        p.write_text(yaml.dump({"orders": [{"id": "x-1", "item": "bolt", "quantity": 9}]}))
        assert load_seed_orders(p) == [{"id": "x-1", "item": "bolt", "quantity": 9}]

    def test_empty_seed_file(self, tmp_path: Path):
        p = tmp_path / "seed.yaml"
        p.write_text("")
        assert load_seed_orders(p) == []

    def test_missing_seed_file(self, tmp_path: Path):
        assert load_seed_orders(tmp_path / "nope.yaml") == []
