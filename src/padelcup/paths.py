"""
Path utilities for padelcup.
"""

from pathlib import Path


def get_i18n_dir() -> Path:
    """Get the directory holding the translated string tables."""
    return Path(__file__).parent / "locales"


def get_data_dir() -> Path:
    """
    Get the user data directory for storing the database and exports.

    Returns:
        .padelcup/ in the current working directory (created if missing)
    """
    data_dir = Path.cwd() / ".padelcup"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_default_db_path() -> Path:
    """Default SQLite database location."""
    return get_data_dir() / "padelcup.sqlite"
