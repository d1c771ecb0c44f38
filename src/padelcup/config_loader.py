"""Configuration loader and validator."""

from pathlib import Path
from typing import Any, Optional

import yaml

from padelcup.i18n import SUPPORTED_LANGUAGES
from padelcup.models import (
    AdvancementSettings,
    ScoringRules,
    StageScoring,
    StageSettings,
    TournamentConfig,
)

RULE_INT_FIELDS = ("games_per_set", "sets_to_win", "tie_break_at")
RULE_BOOL_FIELDS = ("deciding_point", "super_tie_break_in_final_set")


class ConfigError(Exception):
    """Configuration validation error."""

    pass


def load_config(path: str) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file

    Returns:
        Dictionary with configuration values

    Raises:
        ConfigError: If file not found or invalid YAML
    """
    config_file = Path(path)

    if not config_file.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if config is None:
        raise ConfigError("Config file is empty")

    if not isinstance(config, dict):
        raise ConfigError("Config file must contain a mapping")

    return config


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_scoring_rules(data: Optional[dict[str, Any]], stage: str) -> ScoringRules:
    """Validate one stage's scoring block and build its ScoringRules.

    Missing fields take the ScoringRules defaults.
    """
    if data is None:
        return ScoringRules()
    if not isinstance(data, dict):
        raise ConfigError(f"scoring.{stage} must be a dictionary")

    unknown = set(data) - set(RULE_INT_FIELDS) - set(RULE_BOOL_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown fields in scoring.{stage}: {sorted(unknown)}")

    values: dict[str, Any] = {}
    for name in RULE_INT_FIELDS:
        if name in data:
            if not _is_int(data[name]) or data[name] < 1:
                raise ConfigError(f"scoring.{stage}.{name} must be a positive integer")
            values[name] = data[name]
    for name in RULE_BOOL_FIELDS:
        if name in data:
            if not isinstance(data[name], bool):
                raise ConfigError(f"scoring.{stage}.{name} must be true or false")
            values[name] = data[name]

    return ScoringRules(**values)


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate configuration values.

    Args:
        config: Configuration dictionary

    Returns:
        Validated and normalized configuration

    Raises:
        ConfigError: If validation fails
    """
    validated: dict[str, Any] = {}

    # Name (required)
    name = config.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("Missing required field: name")
    validated["name"] = name.strip()

    # Stages (default: groups + knockout)
    stages = config.get("stages", {})
    if not isinstance(stages, dict):
        raise ConfigError("stages must be a dictionary")
    group_stage = stages.get("group_stage", True)
    knockout_stage = stages.get("knockout_stage", True)
    if not isinstance(group_stage, bool) or not isinstance(knockout_stage, bool):
        raise ConfigError("stages.group_stage and stages.knockout_stage must be true or false")
    if not group_stage and not knockout_stage:
        raise ConfigError("At least one stage must be enabled")
    validated["stages"] = StageSettings(group_stage=group_stage, knockout_stage=knockout_stage)

    # Scoring (independent rules per stage)
    scoring = config.get("scoring", {})
    if not isinstance(scoring, dict):
        raise ConfigError("scoring must be a dictionary")
    validated["scoring"] = StageScoring(
        group=validate_scoring_rules(scoring.get("group"), "group"),
        knockout=validate_scoring_rules(scoring.get("knockout"), "knockout"),
    )

    # Advancement (optional, default 2 per group)
    advancement = config.get("advancement", {})
    if not isinstance(advancement, dict):
        raise ConfigError("advancement must be a dictionary")
    teams_per_group = advancement.get("teams_per_group", 2)
    if not _is_int(teams_per_group) or teams_per_group < 1:
        raise ConfigError("advancement.teams_per_group must be a positive integer")
    validated["advancement"] = AdvancementSettings(teams_per_group=teams_per_group)

    # Group count (optional, default chosen from the team count)
    group_count = config.get("group_count")
    if group_count is not None and (not _is_int(group_count) or group_count < 1):
        raise ConfigError("group_count must be a positive integer")
    validated["group_count"] = group_count

    # Random seed (optional, None = random draw)
    random_seed = config.get("random_seed")
    if random_seed is not None and not _is_int(random_seed):
        raise ConfigError("random_seed must be an integer")
    validated["random_seed"] = random_seed

    # Language (optional, default 'en')
    lang = config.get("lang", "en")
    if lang not in SUPPORTED_LANGUAGES:
        raise ConfigError(f"lang must be one of {SUPPORTED_LANGUAGES}, got '{lang}'")
    validated["lang"] = lang

    return validated


def to_tournament_config(validated: dict[str, Any]) -> TournamentConfig:
    """Build the TournamentConfig from a validated configuration."""
    return TournamentConfig(
        name=validated["name"],
        stages=validated["stages"],
        scoring=validated["scoring"],
        advancement=validated["advancement"],
    )


def load_and_validate_config(path: str) -> dict[str, Any]:
    """Load and validate configuration in one step.

    Args:
        path: Path to YAML config file

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigError: If loading or validation fails
    """
    config = load_config(path)
    return validate_config(config)
