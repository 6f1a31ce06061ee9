from fastapi import APIRouter, Depends

from src.api.dependencies import get_payment_service, get_profile
from src.api.schemas import DepositRequest, DepositResponse
from src.services.payments import PaymentService

api = APIRouter()
balances_api = api


@api.post("/balances/deposit/{user_id}", response_model=DepositResponse, tags=["Balances"])
async def deposit(
    user_id: int,
    body: DepositRequest,
    profile=Depends(get_profile),
    payments: PaymentService = Depends(get_payment_service),
):
    """
    Deposit money into a client's balance. A client can't deposit more than
    25% of their total of jobs to pay (unpaid jobs under in-progress contracts).
    """
    receipt = payments.deposit(user_id, body.amount)
    return DepositResponse(profile_id=receipt.profile_id, amount=receipt.amount, balance=receipt.balance)
