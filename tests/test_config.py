import logging

import pytest
from hypothesis import given, strategies as st

from frankentuples.config import Settings
from frankentuples.literal import LiteralSyntaxError, parse_ftuple
from frankentuples.logging import get_logger


class TestSettings:
    def test_default_values(self):
        """Test that Settings has sensible defaults."""
        settings = Settings()
        assert settings.resolve_names is True
        assert settings.max_literal_length == 10_000
        assert settings.numeric_promotion is True

    def test_custom_values(self):
        """Test that Settings accepts custom values."""
        settings = Settings(
            resolve_names=False,
            max_literal_length=50,
            numeric_promotion=False,
        )
        assert settings.resolve_names is False
        assert settings.max_literal_length == 50
        assert settings.numeric_promotion is False


class TestLiteralLengthLimit:
    """
    **Feature: frankentuples, Property 4: Config Invariants**
    """

    @given(limit=st.integers(min_value=0, max_value=40), count=st.integers(min_value=0, max_value=15))
    def test_limit_is_enforced(self, limit, count):
        """For any limit, literals longer than it are rejected and shorter ones parse."""
        source = "(" + ", ".join("1" for _ in range(count)) + ")"
        settings = Settings(max_literal_length=limit)
        if len(source) > limit:
            with pytest.raises(LiteralSyntaxError):
                parse_ftuple(source, settings=settings)
        else:
            assert len(parse_ftuple(source, settings=settings)) == count


class TestGetLogger:
    def test_default_level_is_warning(self, monkeypatch):
        monkeypatch.delenv("FRANKENTUPLES_LOG_LEVEL", raising=False)
        logger = get_logger("frankentuples.tests.default")
        assert logger.level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("FRANKENTUPLES_LOG_LEVEL", "debug")
        logger = get_logger("frankentuples.tests.debug")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("FRANKENTUPLES_LOG_LEVEL", "CHATTY")
        logger = get_logger("frankentuples.tests.unknown")
        assert logger.level == logging.WARNING

    def test_handler_added_once(self):
        first = get_logger("frankentuples.tests.once")
        second = get_logger("frankentuples.tests.once")
        assert first is second
        assert len(second.handlers) == 1
