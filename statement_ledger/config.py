"""Configuration loader for the statement ledger."""

from pathlib import Path
import yaml

from .classifier import CategoryClassifier
from .report import DEPRECIATION_MONTHS


def load_config(config_path: str | Path = "config.yaml") -> dict:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    return config or {}


def get_config() -> dict:
    """Get configuration, searching in common locations.

    Built-in defaults apply when no config.yaml exists.
    """
    search_paths = [
        Path("config.yaml"),
        Path(__file__).parent.parent / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return load_config(path)

    return {}


def build_classifier(config: dict) -> CategoryClassifier:
    """Create a classifier with the user's classification_rules applied."""
    return CategoryClassifier(classification_rules=config.get("classification_rules") or {})


def depreciation_months(config: dict) -> int:
    months = (config.get("report") or {}).get("depreciation_months", DEPRECIATION_MONTHS)
    if not isinstance(months, int) or months <= 0:
        raise ValueError(f"report.depreciation_months must be a positive integer, got {months!r}")
    return months


def pdf_password(config: dict) -> str | None:
    return config.get("pdf_password")
