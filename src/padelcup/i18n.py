"""Translated UI strings (English and Spanish)."""

import os
from typing import Any, Dict, Optional

import yaml

from padelcup.paths import get_i18n_dir

SUPPORTED_LANGUAGES = ["en", "es"]
DEFAULT_LANGUAGE = "en"
LANG_ENV_VAR = "PADELCUP_LANG"

# Parsed string tables by language code
_tables: Dict[str, Dict[str, Any]] = {}


def load_strings(lang: str) -> Dict[str, Any]:
    """
    Return the string table of a language, reading it on first use.

    Tables live in locales/strings_{lang}.yaml inside the package.

    Raises:
        ValueError: If the language is not one of SUPPORTED_LANGUAGES
        FileNotFoundError: If the table file is missing
    """
    if lang not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Language '{lang}' not supported. Supported languages: {SUPPORTED_LANGUAGES}"
        )

    table = _tables.get(lang)
    if table is None:
        path = get_i18n_dir() / f"strings_{lang}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Strings file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            table = yaml.safe_load(f) or {}
        _tables[lang] = table
    return table


def _lookup(table: Dict[str, Any], key: str) -> Optional[str]:
    """Follow a dotted key through nested sections; None unless it ends on text."""
    node: Any = table
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def _resolve(key: str, lang: str) -> Optional[str]:
    for candidate in (lang, DEFAULT_LANGUAGE):
        try:
            text = _lookup(load_strings(candidate), key)
        except (ValueError, FileNotFoundError):
            continue
        if text is not None:
            return text
    return None


def get_string(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Translate a dotted key such as "rounds.semiFinal".

    Keys missing from ``lang`` are looked up in English; a key missing from
    both is returned unchanged. Keyword arguments fill ``{placeholders}``;
    if one is missing the text is returned unformatted.

    Examples:
        >>> get_string("rounds.quarterFinal", "es")
        'Cuartos de final'
        >>> get_string("rounds.roundOf", "en", size=32)
        'Round of 32'
    """
    text = _resolve(key, lang)
    if text is None:
        return key
    if not kwargs:
        return text
    try:
        return text.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return text


def clear_cache() -> None:
    """Forget loaded tables so the next lookup reads the files again."""
    _tables.clear()


def get_language_from_env() -> str:
    """Language chosen through PADELCUP_LANG, DEFAULT_LANGUAGE if unset or unknown."""
    lang = os.environ.get(LANG_ENV_VAR, DEFAULT_LANGUAGE)
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE
