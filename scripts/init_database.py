#!/usr/bin/env python3
"""
Create the marketplace tables for DATABASE_URL.

Goes through MarketplaceStore so the engine gets the same SQLite, pool and
isolation settings as the API. Existing tables are left untouched.
"""

from __future__ import annotations
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from src.database.store_real import MarketplaceStore
from src.utils.config_loader import load_marketplace_config


def main() -> int:
    logging.basicConfig(level=logging.INFO)

    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1

    db_config = load_marketplace_config().database
    store = MarketplaceStore(
        connection_string=url,
        isolation_level=db_config.isolation_level,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
    )
    if not store.ping():
        print("Could not reach the database", file=sys.stderr)
        return 2

    store.create_tables()
    tables = sorted(inspect(store.engine).get_table_names())
    print(f"Marketplace tables: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
