"""Tests for internationalization (i18n) module."""

import os
import pytest

from padelcup.i18n import (
    load_strings,
    get_string,
    clear_cache,
    get_language_from_env,
    LANG_ENV_VAR,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)


class TestI18n:
    """Test i18n functionality."""

    def setup_method(self):
        """Clear cache before each test."""
        clear_cache()
        if LANG_ENV_VAR in os.environ:
            del os.environ[LANG_ENV_VAR]

    def teardown_method(self):
        """Clean up after each test."""
        clear_cache()
        if LANG_ENV_VAR in os.environ:
            del os.environ[LANG_ENV_VAR]

    def test_load_strings_spanish(self):
        """Test loading Spanish strings."""
        strings = load_strings("es")
        assert isinstance(strings, dict)
        assert strings["app"]["title"] == "Gestor de Torneos de Pádel"

    def test_load_strings_english(self):
        """Test loading English strings."""
        strings = load_strings("en")
        assert strings["app"]["title"] == "Padel Tournament Manager"

    def test_load_strings_invalid_language(self):
        """Test loading strings with invalid language raises error."""
        with pytest.raises(ValueError, match="not supported"):
            load_strings("fr")

    def test_load_strings_caching(self):
        """Test that strings are cached after first load."""
        assert load_strings("es") is load_strings("es")

    def test_get_string_nested_key(self):
        """Test getting a nested string using dot notation."""
        assert get_string("rounds.quarterFinal", "es") == "Cuartos de final"
        assert get_string("rounds.quarterFinal", "en") == "Quarterfinal"
        assert get_string("labels.tbd", "es") == "Por definir"

    def test_get_string_with_formatting(self):
        """Test getting a string with format variables."""
        assert get_string("rounds.roundOf", "en", size=32) == "Round of 32"
        assert get_string("rounds.roundOf", "es", size=32) == "Ronda de 32"
        assert get_string("group.round", "en", number=3) == "Round 3"

    def test_get_string_missing_format_variable(self):
        """A missing variable returns the unformatted string."""
        assert get_string("cli.score.winner", "en", other="x") == "Winner: {team}"

    def test_get_string_missing_key(self):
        """Test getting a non-existent key returns the key itself."""
        assert get_string("nonexistent.key", "es") == "nonexistent.key"

    def test_get_string_section_is_not_a_string(self):
        """Keys that name a whole section return the key."""
        assert get_string("rounds", "en") == "rounds"

    def test_get_string_unsupported_language_falls_back(self):
        assert get_string("rounds.final", "fr") == "Final"

    def test_every_english_key_is_translated(self):
        """The Spanish table defines the same keys as the English one."""

        def keys(tree, prefix=""):
            for k, v in tree.items():
                if isinstance(v, dict):
                    yield from keys(v, f"{prefix}{k}.")
                else:
                    yield f"{prefix}{k}"

        assert set(keys(load_strings("en"))) == set(keys(load_strings("es")))

    def test_get_language_from_env_default(self):
        """Test getting language from env when not set."""
        assert get_language_from_env() == DEFAULT_LANGUAGE

    def test_get_language_from_env_set(self):
        """Test getting language from env when set."""
        os.environ[LANG_ENV_VAR] = "es"
        assert get_language_from_env() == "es"

        os.environ[LANG_ENV_VAR] = "en"
        assert get_language_from_env() == "en"

    def test_get_language_from_env_invalid(self):
        """Test getting language from env with invalid value."""
        os.environ[LANG_ENV_VAR] = "fr"
        assert get_language_from_env() == DEFAULT_LANGUAGE

    def test_clear_cache(self):
        """Test clearing the cache."""
        first = load_strings("en")
        clear_cache()
        second = load_strings("en")
        assert first is not second
        assert first == second

    def test_supported_languages(self):
        """Test that supported languages constant is correct."""
        assert SUPPORTED_LANGUAGES == ["en", "es"]
        assert DEFAULT_LANGUAGE == "en"
