"""
Utility modules for the marketplace API
"""
from .config_loader import MarketplaceConfig, load_marketplace_config
from .date_range import parse_date_range

__all__ = [
    'MarketplaceConfig',
    'load_marketplace_config',
    'parse_date_range',
]
