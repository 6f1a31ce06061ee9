"""
Request/response models for the marketplace API.

Money is kept as Decimal inside the services and rendered as JSON numbers.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    profession: str
    balance: float
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContractOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    terms: str
    status: str
    client_id: int
    contractor_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    price: float
    paid: Optional[bool] = None
    payment_date: Optional[datetime] = None
    contract_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Amount to add to the profile balance")


class PaymentResponse(BaseModel):
    message: str = "Job Paid Successfully!"
    job_id: int
    amount: float
    balance: float
    paid_at: datetime


class DepositResponse(BaseModel):
    message: str = "Amount Deposited Successfully!"
    profile_id: int
    amount: float
    balance: float


class BestProfession(BaseModel):
    profession: str
    earned: float


class BestClient(BaseModel):
    id: int
    fullName: str
    paid: float
