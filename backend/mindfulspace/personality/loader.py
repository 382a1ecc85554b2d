"""Persona configuration loader."""

from pathlib import Path
from typing import Any

import yaml


_DEFAULT_PATH = Path(__file__).parent / "default.yaml"

_REQUIRED_KEYS = ("chat_prompt", "summary_prompt")


def load_personality(path: Path | None = None) -> dict[str, Any]:
    """Load persona configuration from YAML file.

    Args:
        path: Optional path to persona YAML file.
              Defaults to default.yaml in this directory.

    Returns:
        Dictionary with persona configuration.

    Raises:
        FileNotFoundError: If the persona file does not exist.
        ValueError: If a required prompt is missing or empty.
        yaml.YAMLError: If the file contains invalid YAML.
    """
    config_path = path or _DEFAULT_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Personality file not found: {config_path}")

    with open(config_path) as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    missing = [key for key in _REQUIRED_KEYS if not str(config.get(key, "")).strip()]
    if missing:
        raise ValueError(
            f"Personality file {config_path} is missing: {', '.join(missing)}"
        )

    return config
