from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_db, get_profile
from src.api.schemas import ContractOut
from src.services.errors import NotFoundError

api = APIRouter()
contracts_api = api


@api.get("/contracts/{contract_id}", response_model=ContractOut, tags=["Contracts"])
async def get_contract(contract_id: int, profile=Depends(get_profile), db=Depends(get_db)):
    """A contract the caller is party to, as client or contractor."""
    contract = db.get_contract_for_profile(contract_id, profile.id)
    if not contract:
        raise NotFoundError()
    return ContractOut.model_validate(contract)


@api.get("/contracts", response_model=List[ContractOut], tags=["Contracts"])
async def list_contracts(profile=Depends(get_profile), db=Depends(get_db)):
    """The caller's contracts that are not terminated."""
    contracts = db.list_active_contracts(profile.id)
    if not contracts:
        raise NotFoundError()
    return [ContractOut.model_validate(c) for c in contracts]


@api.get("/allContracts", response_model=List[ContractOut], tags=["Listings"])
async def list_all_contracts(db=Depends(get_db)):
    contracts = db.list_contracts()
    if not contracts:
        raise NotFoundError()
    return [ContractOut.model_validate(c) for c in contracts]
