"""Job payments and balance deposits.

Both operations run inside a single store transaction: every mutation either
commits together or is rolled back. Business-rule violations surface as
`MarketplaceError` subclasses; any other fault raised by the store is
reported as `TransactionFailure` after the rollback.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from src.services.errors import (
    CapExceededError,
    InsufficientFundsError,
    InvalidAmountError,
    MarketplaceError,
    NotFoundError,
    TransactionFailure,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPOSIT_CAP_RATIO = Decimal("0.25")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class PaymentReceipt:
    job_id: int
    client_id: int
    contractor_id: int
    amount: Decimal
    client_balance: Decimal
    paid_at: datetime


@dataclass(frozen=True)
class DepositReceipt:
    profile_id: int
    amount: Decimal
    balance: Decimal
    max_deposit: Decimal


def _coerce_amount(value: Any) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError() from None
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError()
    try:
        sub_cent = amount != amount.quantize(_CENT)
    except InvalidOperation:
        # too many digits to quantize; only the exponent can tell
        sub_cent = amount.as_tuple().exponent < -2
    if sub_cent:
        raise InvalidAmountError("Deposit amount must have at most two decimal places.")
    return amount


class PaymentService:
    def __init__(
        self,
        store,
        deposit_cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.deposit_cap_ratio = Decimal(str(deposit_cap_ratio))
        self.clock = clock or datetime.utcnow

    def pay_for_job(self, job_id: int, payer_id: int) -> PaymentReceipt:
        """Move a job's price from its client to its contractor and mark it paid."""
        try:
            with self.store.transaction() as tx:
                job = tx.find_payable_job(job_id, payer_id)
                if job is None:
                    raise NotFoundError()
                payer = tx.get_profile(payer_id)
                if payer is None:
                    raise NotFoundError()
                if payer.balance < job.price:
                    raise InsufficientFundsError(payload={"balance": payer.balance, "price": job.price})
                if payer.role != "client":
                    raise UnauthorizedError()

                # Conditional updates: a concurrent payment may have drained
                # the balance or paid the job since the checks above.
                if not tx.debit(payer_id, job.price):
                    raise InsufficientFundsError()
                if not tx.credit(job.contractor_id, job.price):
                    raise NotFoundError()
                paid_at = self.clock()
                if not tx.mark_job_paid(job.job_id, paid_at):
                    raise NotFoundError()

                client_balance = tx.get_profile(payer_id).balance
        except MarketplaceError as e:
            logger.info("Payment for job %s by profile %s rejected: %s", job_id, payer_id, e.message)
            raise
        except Exception as e:
            logger.error("Payment for job %s by profile %s failed, rolled back: %s", job_id, payer_id, e, exc_info=True)
            raise TransactionFailure("Error! while paying for the job") from e

        logger.info(
            "Job %s paid: %s moved from profile %s to profile %s",
            job.job_id,
            job.price,
            job.client_id,
            job.contractor_id,
        )
        return PaymentReceipt(
            job_id=job.job_id,
            client_id=job.client_id,
            contractor_id=job.contractor_id,
            amount=job.price,
            client_balance=client_balance,
            paid_at=paid_at,
        )

    def deposit(self, profile_id: int, amount: Any) -> DepositReceipt:
        """Top up a client's balance, capped by a share of their unpaid in-progress jobs."""
        amount = _coerce_amount(amount)
        try:
            with self.store.transaction() as tx:
                unpaid_total = tx.unpaid_total_for_client(profile_id)
                if not unpaid_total or unpaid_total <= 0:
                    raise NotFoundError()
                max_deposit = unpaid_total * self.deposit_cap_ratio
                if amount > max_deposit:
                    raise CapExceededError(payload={"max_deposit": max_deposit})
                if not tx.credit(profile_id, amount):
                    raise NotFoundError()
                balance = tx.get_profile(profile_id).balance
        except MarketplaceError as e:
            logger.info("Deposit of %s to profile %s rejected: %s", amount, profile_id, e.message)
            raise
        except Exception as e:
            logger.error("Deposit of %s to profile %s failed, rolled back: %s", amount, profile_id, e, exc_info=True)
            raise TransactionFailure("Error! while depositing money.") from e

        logger.info("Deposited %s to profile %s (cap %s)", amount, profile_id, max_deposit)
        return DepositReceipt(profile_id=profile_id, amount=amount, balance=balance, max_deposit=max_deposit)
