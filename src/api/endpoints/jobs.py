from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_db, get_payment_service, get_profile
from src.api.schemas import JobOut, PaymentResponse
from src.services.errors import NotFoundError
from src.services.payments import PaymentService

api = APIRouter()
jobs_api = api


@api.get("/jobs/unpaid", response_model=List[JobOut], tags=["Jobs"])
async def list_unpaid_jobs(profile=Depends(get_profile), db=Depends(get_db)):
    """Unpaid jobs under the caller's in-progress contracts."""
    jobs = db.list_unpaid_jobs(profile.id)
    if not jobs:
        raise NotFoundError()
    return [JobOut.model_validate(j) for j in jobs]


@api.post("/jobs/{job_id}/pay", response_model=PaymentResponse, tags=["Jobs"])
async def pay_for_job(
    job_id: int,
    profile=Depends(get_profile),
    payments: PaymentService = Depends(get_payment_service),
):
    """Pay a job from the caller's balance to the contractor. Any request body is ignored."""
    receipt = payments.pay_for_job(job_id, profile.id)
    return PaymentResponse(
        job_id=receipt.job_id,
        amount=receipt.amount,
        balance=receipt.client_balance,
        paid_at=receipt.paid_at,
    )


@api.get("/jobs", response_model=List[JobOut], tags=["Listings"])
async def list_all_jobs(db=Depends(get_db)):
    jobs = db.list_jobs()
    if not jobs:
        raise NotFoundError()
    return [JobOut.model_validate(j) for j in jobs]
