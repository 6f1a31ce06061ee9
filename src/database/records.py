"""
Plain records shared by both store implementations.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PayableJob:
    """An unpaid job under an in-progress contract, as seen by its paying client."""

    job_id: int
    price: Decimal
    client_id: int
    contractor_id: int
