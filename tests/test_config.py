"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from kingplay.config import (
    ApiConfig,
    AppConfig,
    BookingConfig,
    MirrorConfig,
    _safe_bool,
    _safe_float,
    _safe_int,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_default_values(self):
        config = AppConfig()
        assert config.api.base_url.endswith("/api")
        assert config.mirror.key_prefix == "kpb_local_"
        assert config.booking.minimum_age == 18

    def test_non_http_base_url(self):
        config = AppConfig(api=replace(ApiConfig(), base_url="ftp://example.com"))
        with pytest.raises(ValueError, match="API_BASE_URL"):
            _validate_config(config)

    def test_zero_timeout(self):
        config = AppConfig(api=replace(ApiConfig(), timeout_seconds=0))
        with pytest.raises(ValueError, match="API_TIMEOUT_SECONDS"):
            _validate_config(config)

    def test_empty_key_prefix(self):
        config = AppConfig(mirror=replace(MirrorConfig(), key_prefix=""))
        with pytest.raises(ValueError, match="MIRROR_KEY_PREFIX"):
            _validate_config(config)

    def test_empty_mirror_path(self):
        config = AppConfig(mirror=replace(MirrorConfig(), path=""))
        with pytest.raises(ValueError, match="MIRROR_PATH"):
            _validate_config(config)

    def test_invalid_minimum_age(self):
        config = AppConfig(booking=replace(BookingConfig(), minimum_age=0))
        with pytest.raises(ValueError, match="MINIMUM_AGE"):
            _validate_config(config)


class TestEnvParsing:
    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("KPB_TEST_INT", "forty")
        with pytest.raises(ValueError, match="KPB_TEST_INT"):
            _safe_int("KPB_TEST_INT", "1")

    def test_safe_float_parsing(self):
        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)

    @pytest.mark.parametrize("raw,expected", [("true", True), ("YES", True), ("0", False), ("off", False)])
    def test_safe_bool_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("KPB_TEST_BOOL", raw)
        assert _safe_bool("KPB_TEST_BOOL", "false") is expected

    def test_safe_bool_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("KPB_TEST_BOOL", "maybe")
        with pytest.raises(ValueError, match="KPB_TEST_BOOL"):
            _safe_bool("KPB_TEST_BOOL", "true")
