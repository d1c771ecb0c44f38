"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from padelcup.config_loader import (
    ConfigError,
    load_and_validate_config,
    load_config,
    to_tournament_config,
    validate_config,
    validate_scoring_rules,
)
from padelcup.models import ScoringRules

SAMPLE_CONFIG = Path(__file__).parent.parent / "config" / "sample_config.yaml"


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_sample_config():
    cfg = load_and_validate_config(str(SAMPLE_CONFIG))

    assert cfg["name"] == "Summer Padel Cup"
    assert cfg["stages"].is_mixed
    assert cfg["scoring"].group.sets_to_win == 1
    assert cfg["scoring"].knockout.sets_to_win == 2
    assert cfg["scoring"].knockout.super_tie_break_in_final_set is True
    assert cfg["advancement"].teams_per_group == 2
    assert cfg["random_seed"] == 42
    assert cfg["group_count"] is None
    assert cfg["lang"] == "en"


def test_minimal_config_defaults():
    cfg = validate_config({"name": "  Friday Americano  "})

    assert cfg["name"] == "Friday Americano"
    assert cfg["stages"].group_stage and cfg["stages"].knockout_stage
    assert cfg["scoring"].group == ScoringRules()
    assert cfg["scoring"].knockout == ScoringRules()
    assert cfg["random_seed"] is None
    assert cfg["lang"] == "en"


def test_to_tournament_config():
    cfg = validate_config({
        "name": "Cup",
        "stages": {"group_stage": False},
        "scoring": {"knockout": {"sets_to_win": 3}},
    })

    config = to_tournament_config(cfg)

    assert config.name == "Cup"
    assert not config.stages.group_stage
    assert config.scoring.knockout.max_sets == 5
    assert config.scoring.group.max_sets == 3


@pytest.mark.parametrize(
    "config, message",
    [
        ({}, "name"),
        ({"name": "  "}, "name"),
        ({"name": "X", "stages": {"group_stage": False, "knockout_stage": False}}, "At least one stage"),
        ({"name": "X", "stages": {"group_stage": "yes"}}, "true or false"),
        ({"name": "X", "stages": []}, "stages must be"),
        ({"name": "X", "scoring": {"group": {"sets_to_win": 0}}}, "scoring.group.sets_to_win"),
        ({"name": "X", "scoring": {"knockout": {"games_per_set": "6"}}}, "scoring.knockout.games_per_set"),
        ({"name": "X", "scoring": {"group": {"deciding_point": 1}}}, "deciding_point"),
        ({"name": "X", "scoring": {"group": {"golden_point": True}}}, "Unknown fields"),
        ({"name": "X", "advancement": {"teams_per_group": 0}}, "teams_per_group"),
        ({"name": "X", "group_count": -1}, "group_count"),
        ({"name": "X", "random_seed": "abc"}, "random_seed"),
        ({"name": "X", "lang": "fr"}, "lang must be"),
    ],
)
def test_invalid_config(config, message):
    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_validate_scoring_rules_partial():
    rules = validate_scoring_rules({"sets_to_win": 1, "deciding_point": True}, "group")

    assert rules == ScoringRules(sets_to_win=1, deciding_point=True)
    assert validate_scoring_rules(None, "group") == ScoringRules()

    with pytest.raises(ConfigError, match="must be a dictionary"):
        validate_scoring_rules(["sets_to_win"], "group")


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "missing.yaml"))

    with pytest.raises(ConfigError, match="empty"):
        load_config(write_config(tmp_path, ""))

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(write_config(tmp_path, "name: [unclosed"))

    with pytest.raises(ConfigError, match="mapping"):
        load_config(write_config(tmp_path, "- a\n- b\n"))


def test_load_and_validate_from_file(tmp_path):
    path = write_config(
        tmp_path,
        "name: Club Night\n"
        "stages:\n"
        "  knockout_stage: false\n"
        "group_count: 3\n"
        "lang: es\n",
    )

    cfg = load_and_validate_config(path)

    assert cfg["name"] == "Club Night"
    assert not cfg["stages"].is_mixed
    assert cfg["group_count"] == 3
    assert cfg["lang"] == "es"
