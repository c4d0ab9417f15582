"""Tests for settings parsing."""

import pytest

from geotagger.config import load_settings, parse_settings


@pytest.mark.unit
class TestParseSettings:
    """Test parse_settings()."""

    def test_defaults(self):
        settings = parse_settings({})

        assert settings["search_limit"] == 5
        assert settings["min_query_length"] == 3
        assert settings["thumbnail_size"] == (300, 300)
        assert settings["user_agent"]

    def test_overrides(self):
        settings = parse_settings({
            "user_agent": "  my-agent ",
            "search_limit": 10,
            "thumbnail_size": [128, 96],
        })

        assert settings["user_agent"] == "my-agent"
        assert settings["search_limit"] == 10
        assert settings["thumbnail_size"] == (128, 96)

    def test_invalid_values_fall_back(self):
        settings = parse_settings({
            "user_agent": "",
            "search_limit": -1,
            "min_query_length": True,
            "thumbnail_size": [0, 10],
        })

        assert settings == parse_settings({})

    def test_load_settings_is_cached(self):
        assert load_settings() is load_settings()
