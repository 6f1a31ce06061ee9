"""
Configuration loader for the marketplace API (payments, reports, database).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "marketplace_config.yml"


class PaymentsConfig(BaseModel):
    """Deposit rules"""

    deposit_cap_ratio: Decimal = Field(default=Decimal("0.25"), gt=0, le=1)


class ReportsConfig(BaseModel):
    """Admin report defaults"""

    default_best_clients_limit: int = Field(default=2, ge=1)
    max_best_clients_limit: int = Field(default=100, ge=1)


class DatabaseConfig(BaseModel):
    """Engine settings for the SQL store"""

    isolation_level: Literal["READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"] = "READ COMMITTED"
    pool_size: int = Field(default=5, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)


class MarketplaceConfig(BaseModel):
    payments: PaymentsConfig = Field(default_factory=PaymentsConfig)
    reports: ReportsConfig = Field(default_factory=ReportsConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)


def load_marketplace_config(config_path: Optional[Path] = None) -> MarketplaceConfig:
    """
    Load and validate the marketplace configuration from a YAML file

    Args:
        config_path: Path to config file. Defaults to config/marketplace_config.yml

    Returns:
        Validated MarketplaceConfig object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.warning("Config file not found at %s; using defaults", DEFAULT_CONFIG_PATH)
            return MarketplaceConfig()
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = MarketplaceConfig(**data)
        logger.info("Successfully loaded marketplace config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Marketplace config validation failed: %s", e)
        raise
