"""
Lightweight in-memory marketplace store for local development and tests.

This provides the same interface as `src.database.store_real` so the API
and payment services can run without a real database. It is NOT intended
for production use.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from src.database.records import PayableJob


@dataclass
class Profile:
    id: int
    first_name: str
    last_name: str
    profession: str
    role: str
    balance: Decimal = Decimal("0")
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Contract:
    id: int
    terms: str
    client_id: int
    contractor_id: int
    status: str = "new"
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Job:
    id: int
    description: str
    price: Decimal
    contract_id: int
    paid: Optional[bool] = None
    payment_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


def _is_unpaid(job: Job) -> bool:
    return not job.paid


def _paid_within(job: Job, start: datetime, end: datetime) -> bool:
    return bool(job.paid) and job.payment_date is not None and start <= job.payment_date <= end


class _UnitOfWork:
    """Mutations available inside `MarketplaceStore.transaction()`."""

    def __init__(self, store: "MarketplaceStore") -> None:
        self._store = store

    def get_profile(self, profile_id: int) -> Optional[Profile]:
        profile = self._store._profiles.get(profile_id)
        return replace(profile) if profile else None

    def find_payable_job(self, job_id: int, client_id: int) -> Optional[PayableJob]:
        job = self._store._jobs.get(job_id)
        if job is None or not _is_unpaid(job):
            return None
        contract = self._store._contracts.get(job.contract_id)
        if contract is None or contract.status != "in_progress" or contract.client_id != client_id:
            return None
        return PayableJob(
            job_id=job.id,
            price=job.price,
            client_id=contract.client_id,
            contractor_id=contract.contractor_id,
        )

    def debit(self, profile_id: int, amount: Decimal) -> bool:
        profile = self._store._profiles.get(profile_id)
        if profile is None or profile.balance < amount:
            return False
        profile.balance = profile.balance - amount
        profile.updated_at = datetime.utcnow()
        return True

    def credit(self, profile_id: int, amount: Decimal) -> bool:
        profile = self._store._profiles.get(profile_id)
        if profile is None:
            return False
        profile.balance = profile.balance + amount
        profile.updated_at = datetime.utcnow()
        return True

    def mark_job_paid(self, job_id: int, paid_at: datetime) -> bool:
        job = self._store._jobs.get(job_id)
        if job is None or not _is_unpaid(job):
            return False
        job.paid = True
        job.payment_date = paid_at
        job.updated_at = paid_at
        return True

    def unpaid_total_for_client(self, client_id: int) -> Decimal:
        contract_ids = {
            c.id
            for c in self._store._contracts.values()
            if c.client_id == client_id and c.status == "in_progress"
        }
        return sum(
            (j.price for j in self._store._jobs.values() if j.contract_id in contract_ids and _is_unpaid(j)),
            Decimal("0"),
        )


class MarketplaceStore:
    """
    In-memory stand-in for the SQLAlchemy-backed marketplace store.

    Reads and transactions share one re-entrant lock; a snapshot of
    profiles and jobs is restored when the transaction body raises.
    """

    def __init__(self) -> None:
        self._profiles: Dict[int, Profile] = {}
        self._contracts: Dict[int, Contract] = {}
        self._jobs: Dict[int, Job] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ #
    # Schema / lifecycle
    # ------------------------------------------------------------------ #
    def create_tables(self) -> None:
        """
        No-op for the in-memory implementation. Kept for compatibility
        with the startup hook in `src/api/main.py`.
        """
        return None

    def ping(self) -> bool:
        return True

    @contextmanager
    def transaction(self) -> Iterator[_UnitOfWork]:
        with self._lock:
            profiles = {k: replace(v) for k, v in self._profiles.items()}
            jobs = {k: replace(v) for k, v in self._jobs.items()}
            try:
                yield _UnitOfWork(self)
            except Exception:
                self._profiles = profiles
                self._jobs = jobs
                raise

    # ------------------------------------------------------------------ #
    # Creation (seeding)
    # ------------------------------------------------------------------ #
    def create_profile(
        self,
        *,
        first_name: str,
        last_name: str,
        profession: str,
        role: str,
        balance: Decimal = Decimal("0"),
    ) -> Profile:
        with self._lock:
            pid = max(self._profiles, default=0) + 1
            profile = Profile(
                id=pid,
                first_name=first_name,
                last_name=last_name,
                profession=profession,
                role=role,
                balance=Decimal(str(balance)),
            )
            self._profiles[pid] = profile
            return replace(profile)

    def create_contract(
        self,
        *,
        client_id: int,
        contractor_id: int,
        terms: str,
        status: str = "new",
    ) -> Contract:
        with self._lock:
            cid = max(self._contracts, default=0) + 1
            contract = Contract(
                id=cid,
                terms=terms,
                client_id=client_id,
                contractor_id=contractor_id,
                status=status,
            )
            self._contracts[cid] = contract
            return replace(contract)

    def create_job(
        self,
        *,
        contract_id: int,
        description: str,
        price: Decimal,
        paid: Optional[bool] = None,
        payment_date: Optional[datetime] = None,
    ) -> Job:
        with self._lock:
            jid = max(self._jobs, default=0) + 1
            job = Job(
                id=jid,
                description=description,
                price=Decimal(str(price)),
                contract_id=contract_id,
                paid=paid,
                payment_date=payment_date,
            )
            self._jobs[jid] = job
            return replace(job)
    # ------------------------------------------------------------------ #
    # Profiles
    # ------------------------------------------------------------------ #
    def get_profile(self, profile_id: int) -> Optional[Profile]:
        with self._lock:
            profile = self._profiles.get(profile_id)
            return replace(profile) if profile else None

    def list_profiles(self) -> List[Profile]:
        with self._lock:
            return [replace(p) for p in sorted(self._profiles.values(), key=lambda p: p.id)]

    # ------------------------------------------------------------------ #
    # Contracts
    # ------------------------------------------------------------------ #
    def get_contract_for_profile(self, contract_id: int, profile_id: int) -> Optional[Contract]:
        with self._lock:
            contract = self._contracts.get(contract_id)
            if contract is None or profile_id not in (contract.client_id, contract.contractor_id):
                return None
            return replace(contract)

    def list_active_contracts(self, profile_id: int) -> List[Contract]:
        with self._lock:
            return [
                replace(c)
                for c in sorted(self._contracts.values(), key=lambda c: c.id)
                if profile_id in (c.client_id, c.contractor_id) and c.status != "terminated"
            ]

    def list_contracts(self) -> List[Contract]:
        with self._lock:
            return [replace(c) for c in sorted(self._contracts.values(), key=lambda c: c.id)]

    # ------------------------------------------------------------------ #
    # Jobs
    # ------------------------------------------------------------------ #
    def get_job(self, job_id: int) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            return replace(job) if job else None

    def list_unpaid_jobs(self, profile_id: int) -> List[Job]:
        with self._lock:
            contract_ids = {
                c.id
                for c in self._contracts.values()
                if profile_id in (c.client_id, c.contractor_id) and c.status == "in_progress"
            }
            return [
                replace(j)
                for j in sorted(self._jobs.values(), key=lambda j: j.id)
                if j.contract_id in contract_ids and _is_unpaid(j)
            ]

    def list_jobs(self) -> List[Job]:
        with self._lock:
            return [replace(j) for j in sorted(self._jobs.values(), key=lambda j: j.id)]

    # ------------------------------------------------------------------ #
    # Reports
    # ------------------------------------------------------------------ #
    def best_profession(self, start: datetime, end: datetime) -> Optional[Dict[str, object]]:
        earned: Dict[str, Decimal] = {}
        with self._lock:
            for job in self._jobs.values():
                if not _paid_within(job, start, end):
                    continue
                contractor = self._profiles[self._contracts[job.contract_id].contractor_id]
                if contractor.role != "contractor":
                    continue
                earned[contractor.profession] = earned.get(contractor.profession, Decimal("0")) + job.price
        if not earned:
            return None
        profession, total = sorted(earned.items(), key=lambda kv: (-kv[1], kv[0]))[0]
        return {"profession": profession, "earned": total}

    def best_clients(self, start: datetime, end: datetime, limit: int) -> List[Dict[str, object]]:
        paid: Dict[int, Decimal] = {}
        with self._lock:
            for job in self._jobs.values():
                if not _paid_within(job, start, end):
                    continue
                client = self._profiles[self._contracts[job.contract_id].client_id]
                if client.role != "client":
                    continue
                paid[client.id] = paid.get(client.id, Decimal("0")) + job.price
            names = {pid: f"{p.first_name} {p.last_name}" for pid, p in self._profiles.items() if pid in paid}
        ranked = sorted(paid.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]
        return [{"id": client_id, "fullName": names[client_id], "paid": total} for client_id, total in ranked]
