"""FinFlow configuration.

Settings live in a ``finflow.yaml`` file next to the snapshot export.
A missing default file is fine (defaults apply); a missing file that was
asked for explicitly is an error.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from finflow.core.exceptions import ConfigError, ConfigNotFoundError
from finflow.core.models import DEFAULT_CATEGORIES, Category

logger = logging.getLogger(__name__)

CONFIG_FILE = "finflow.yaml"
CONFIG_ENV_VAR = "FINFLOW_CONFIG"


class FinflowConfig(BaseModel):
    """Configuration for dashboards and reports.

    Amount thresholds for budget status are fixed constants in the engine
    and deliberately not configurable.
    """

    currency: str = Field(default="INR", min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")
    snapshot_path: str = "snapshot.json"
    reports_dir: str = "reports"

    top_categories: int = Field(default=5, ge=1)
    recent_transactions: int = Field(default=5, ge=1)
    fill_trend_gaps: bool = False

    log_level: str = "WARNING"

    categories: list[Category] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    def category_name(self, category_id: str) -> str:
        """Display name for a category id; unknown ids are title-cased."""
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return category_id.replace("_", " ").title()


def load_config(path: Path | str | None = None) -> FinflowConfig:
    """Load configuration from YAML.

    Args:
        path: Config file. If None, ``$FINFLOW_CONFIG`` or ``./finflow.yaml``.

    Returns:
        FinflowConfig. Relative ``snapshot_path`` and ``reports_dir`` are
        resolved against the config file's directory.

    Raises:
        ConfigNotFoundError: If an explicitly named file does not exist.
        ConfigError: If the file is not valid YAML or fails validation.
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE)

    if not config_path.exists():
        if explicit:
            raise ConfigNotFoundError("Config file not found", {"path": str(config_path)})
        logger.debug("No %s found, using defaults", config_path)
        return FinflowConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", {"path": str(config_path)}) from e

    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping", {"path": str(config_path)})

    try:
        config = FinflowConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", {"path": str(config_path)}) from e

    base = config_path.parent
    updates = {}
    if not Path(config.snapshot_path).is_absolute():
        updates["snapshot_path"] = str(base / config.snapshot_path)
    if not Path(config.reports_dir).is_absolute():
        updates["reports_dir"] = str(base / config.reports_dir)

    logger.info("Configuration loaded from %s", config_path)
    return config.model_copy(update=updates)
