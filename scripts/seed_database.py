#!/usr/bin/env python3
"""
Load the demo profiles, contracts and jobs into the database.

Uses DATABASE_URL. Creates missing tables first; refuses to seed a store
that already has profiles unless --force is given.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.database.seed import seed_demo_data
from src.database.store_real import MarketplaceStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the marketplace database with demo data")
    parser.add_argument("--force", action="store_true", help="Seed even if profiles already exist")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1

    store = MarketplaceStore(connection_string=url)
    store.create_tables()
    if store.list_profiles() and not args.force:
        print("Profiles already exist; use --force to seed anyway", file=sys.stderr)
        return 2

    ids = seed_demo_data(store)
    print(f"Seeded demo data ({len(ids)} profiles and contracts)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
