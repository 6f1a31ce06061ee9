"""
Demo data for local runs: four clients, four contractors, nine contracts and
fourteen jobs, some of them paid in mid-August 2020.

Works with either store implementation; ids are taken from the created rows.
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict

logger = logging.getLogger(__name__)

PROFILES = [
    # key, first_name, last_name, profession, balance, role
    ("harry", "Harry", "Potter", "Wizard", "1150", "client"),
    ("robot", "Mr", "Robot", "Hacker", "231.11", "client"),
    ("snow", "John", "Snow", "Knows nothing", "451.3", "client"),
    ("ash", "Ash", "Kethcum", "Pokemon master", "1.3", "client"),
    ("lenon", "John", "Lenon", "Musician", "64", "contractor"),
    ("linus", "Linus", "Torvalds", "Programmer", "1214", "contractor"),
    ("turing", "Alan", "Turing", "Programmer", "22", "contractor"),
    ("aragorn", "Aragorn", "II Elessar Telcontarion", "Fighter", "314", "contractor"),
]

CONTRACTS = [
    # key, client, contractor, status
    ("c1", "harry", "lenon", "terminated"),
    ("c2", "harry", "linus", "in_progress"),
    ("c3", "robot", "linus", "in_progress"),
    ("c4", "robot", "turing", "in_progress"),
    ("c5", "snow", "aragorn", "new"),
    ("c6", "snow", "turing", "in_progress"),
    ("c7", "ash", "turing", "in_progress"),
    ("c8", "ash", "linus", "in_progress"),
    ("c9", "ash", "aragorn", "in_progress"),
]

JOBS = [
    # contract, description, price, payment_date (None = unpaid)
    ("c1", "work", "200", None),
    ("c2", "work", "201", None),
    ("c3", "work", "202", None),
    ("c4", "work", "200", None),
    ("c7", "work", "200", None),
    ("c7", "work", "2020", datetime(2020, 8, 15, 19, 11, 26)),
    ("c2", "work", "200", datetime(2020, 8, 15, 19, 11, 26)),
    ("c3", "work", "200", datetime(2020, 8, 16, 19, 11, 26)),
    ("c1", "work", "200", datetime(2020, 8, 17, 19, 11, 26)),
    ("c5", "work", "200", datetime(2020, 8, 17, 19, 11, 26)),
    ("c1", "work", "21", datetime(2020, 8, 10, 19, 11, 26)),
    ("c2", "work", "21", datetime(2020, 8, 15, 19, 11, 26)),
    ("c3", "work", "121", datetime(2020, 8, 15, 19, 11, 26)),
    ("c3", "work", "121", datetime(2020, 8, 14, 23, 11, 26)),
]


def seed_demo_data(store) -> Dict[str, int]:
    """Insert the demo rows and return a map of profile/contract keys to ids."""
    ids: Dict[str, int] = {}
    for key, first_name, last_name, profession, balance, role in PROFILES:
        p = store.create_profile(
            first_name=first_name,
            last_name=last_name,
            profession=profession,
            role=role,
            balance=Decimal(balance),
        )
        ids[key] = p.id
    for key, client, contractor, status in CONTRACTS:
        c = store.create_contract(
            client_id=ids[client],
            contractor_id=ids[contractor],
            terms="bla bla bla",
            status=status,
        )
        ids[key] = c.id
    for contract, description, price, payment_date in JOBS:
        store.create_job(
            contract_id=ids[contract],
            description=description,
            price=Decimal(price),
            paid=True if payment_date else None,
            payment_date=payment_date,
        )
    logger.info("Seeded %d profiles, %d contracts, %d jobs", len(PROFILES), len(CONTRACTS), len(JOBS))
    return ids
