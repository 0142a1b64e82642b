"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from chronicles.config.models import ChroniclesConfig


def load_config(path: Path | str) -> ChroniclesConfig:
    """Load configuration from YAML file.

    An empty file yields the default configuration.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated ChroniclesConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return ChroniclesConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to the bundled default config file (``configs/default.yaml``)."""
    return Path(__file__).resolve().parents[3] / "configs" / "default.yaml"
