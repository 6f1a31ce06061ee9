"""
Real SQL-backed marketplace store, used when DATABASE_URL is set.
Implements the same interface as src.database.store (in-memory stub).
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, desc, func, or_, select, text, update
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.database.models import Base, Contract, Job, Profile
from src.database.records import PayableJob

logger = logging.getLogger(__name__)


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s


def _engine_kwargs(connection_string: str, isolation_level: str, pool_size: int, max_overflow: int) -> Dict[str, Any]:
    url = make_url(connection_string)
    if url.get_backend_name() == "sqlite":
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_pre_ping": True,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "isolation_level": isolation_level,
    }


def _unpaid():
    return or_(Job.paid.is_(None), Job.paid.is_(False))


def _as_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


class _UnitOfWork:
    """Mutations bound to the session of one `MarketplaceStore.transaction()`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_profile(self, profile_id: int) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.id == profile_id).execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_payable_job(self, job_id: int, client_id: int) -> Optional[PayableJob]:
        stmt = (
            select(Job.id, Job.price, Contract.client_id, Contract.contractor_id)
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                Job.id == job_id,
                _unpaid(),
                Contract.status == "in_progress",
                Contract.client_id == client_id,
            )
            .with_for_update(of=Job)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return PayableJob(
            job_id=row.id,
            price=_as_decimal(row.price),
            client_id=row.client_id,
            contractor_id=row.contractor_id,
        )

    def debit(self, profile_id: int, amount: Decimal) -> bool:
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id, Profile.balance >= amount)
            .values(balance=Profile.balance - amount, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def credit(self, profile_id: int, amount: Decimal) -> bool:
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id)
            .values(balance=Profile.balance + amount, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def mark_job_paid(self, job_id: int, paid_at: datetime) -> bool:
        stmt = (
            update(Job)
            .where(Job.id == job_id, _unpaid())
            .values(paid=True, payment_date=paid_at, updated_at=paid_at)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def unpaid_total_for_client(self, client_id: int) -> Decimal:
        stmt = (
            select(func.sum(Job.price))
            .join(Contract, Job.contract_id == Contract.id)
            .where(Contract.client_id == client_id, Contract.status == "in_progress", _unpaid())
        )
        return _as_decimal(self.session.execute(stmt).scalar())


class MarketplaceStore:
    """
    Marketplace data access using SQLAlchemy. Use when DATABASE_URL is set.

    Connections to server databases run at `isolation_level` (READ COMMITTED
    by default); balance changes are conditional relative updates so they
    stay correct at that level.
    """

    def __init__(
        self,
        connection_string: str,
        *,
        isolation_level: str = "READ COMMITTED",
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> None:
        connection_string = _normalize_connection_string(connection_string)
        self.engine = create_engine(
            connection_string,
            **_engine_kwargs(connection_string, isolation_level, pool_size, max_overflow),
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    @contextmanager
    def _session(self) -> Iterator[Session]:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    @contextmanager
    def transaction(self) -> Iterator[_UnitOfWork]:
        with self._session() as s:
            yield _UnitOfWork(s)

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
        with self._session() as s:
            p = Profile(
                first_name=first_name,
                last_name=last_name,
                profession=profession,
                role=role,
                balance=_as_decimal(balance),
            )
            s.add(p)
            s.flush()
            s.refresh(p)
            return p

    def create_contract(
        self,
        *,
        client_id: int,
        contractor_id: int,
        terms: str,
        status: str = "new",
    ) -> Contract:
        with self._session() as s:
            c = Contract(
                terms=terms,
                client_id=client_id,
                contractor_id=contractor_id,
                status=status,
            )
            s.add(c)
            s.flush()
            s.refresh(c)
            return c

    def create_job(
        self,
        *,
        contract_id: int,
        description: str,
        price: Decimal,
        paid: Optional[bool] = None,
        payment_date: Optional[datetime] = None,
    ) -> Job:
        with self._session() as s:
            j = Job(
                description=description,
                price=_as_decimal(price),
                contract_id=contract_id,
                paid=paid,
                payment_date=payment_date,
            )
            s.add(j)
            s.flush()
            s.refresh(j)
            return j

    # ------------------------------------------------------------------ #
    # Profiles
    # ------------------------------------------------------------------ #
    def get_profile(self, profile_id: int) -> Optional[Profile]:
        with self._session() as s:
            return s.execute(select(Profile).where(Profile.id == profile_id)).scalar_one_or_none()

    def list_profiles(self) -> List[Profile]:
        with self._session() as s:
            return list(s.execute(select(Profile).order_by(Profile.id)).scalars().all())

    # ------------------------------------------------------------------ #
    # Contracts
    # ------------------------------------------------------------------ #
    def get_contract_for_profile(self, contract_id: int, profile_id: int) -> Optional[Contract]:
        with self._session() as s:
            stmt = select(Contract).where(
                Contract.id == contract_id,
                or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id),
            )
            return s.execute(stmt).scalar_one_or_none()

    def list_active_contracts(self, profile_id: int) -> List[Contract]:
        with self._session() as s:
            stmt = (
                select(Contract)
                .where(
                    or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id),
                    Contract.status != "terminated",
                )
                .order_by(Contract.id)
            )
            return list(s.execute(stmt).scalars().all())

    def list_contracts(self) -> List[Contract]:
        with self._session() as s:
            return list(s.execute(select(Contract).order_by(Contract.id)).scalars().all())

    # ------------------------------------------------------------------ #
    # Jobs
    # ------------------------------------------------------------------ #
    def get_job(self, job_id: int) -> Optional[Job]:
        with self._session() as s:
            return s.execute(select(Job).where(Job.id == job_id)).scalar_one_or_none()

    def list_unpaid_jobs(self, profile_id: int) -> List[Job]:
        with self._session() as s:
            stmt = (
                select(Job)
                .join(Contract, Job.contract_id == Contract.id)
                .where(
                    or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id),
                    Contract.status == "in_progress",
                    _unpaid(),
                )
                .order_by(Job.id)
            )
            return list(s.execute(stmt).scalars().all())

    def list_jobs(self) -> List[Job]:
        with self._session() as s:
            return list(s.execute(select(Job).order_by(Job.id)).scalars().all())

    # ------------------------------------------------------------------ #
    # Reports
    # ------------------------------------------------------------------ #
    def best_profession(self, start: datetime, end: datetime) -> Optional[Dict[str, object]]:
        with self._session() as s:
            earned = func.sum(Job.price).label("earned")
            stmt = (
                select(Profile.profession, earned)
                .join(Contract, Contract.contractor_id == Profile.id)
                .join(Job, Job.contract_id == Contract.id)
                .where(
                    Profile.role == "contractor",
                    Job.paid.is_(True),
                    Job.payment_date >= start,
                    Job.payment_date <= end,
                )
                .group_by(Profile.profession)
                .order_by(desc(earned), Profile.profession)
                .limit(1)
            )
            row = s.execute(stmt).one_or_none()
            if row is None:
                return None
            return {"profession": row.profession, "earned": _as_decimal(row.earned)}

    def best_clients(self, start: datetime, end: datetime, limit: int) -> List[Dict[str, object]]:
        with self._session() as s:
            total_paid = func.sum(Job.price).label("total_paid")
            stmt = (
                select(Profile.id, Profile.first_name, Profile.last_name, total_paid)
                .select_from(Job)
                .join(Contract, Job.contract_id == Contract.id)
                .join(Profile, Contract.client_id == Profile.id)
                .where(
                    Profile.role == "client",
                    Job.paid.is_(True),
                    Job.payment_date >= start,
                    Job.payment_date <= end,
                )
                .group_by(Profile.id, Profile.first_name, Profile.last_name)
                .order_by(desc(total_paid), Profile.id)
                .limit(limit)
            )
            return [
                {
                    "id": row.id,
                    "fullName": f"{row.first_name} {row.last_name}",
                    "paid": _as_decimal(row.total_paid),
                }
                for row in s.execute(stmt).all()
            ]
