from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_db
from src.api.schemas import ProfileOut
from src.services.errors import NotFoundError

api = APIRouter()
profiles_api = api


@api.get("/profiles", response_model=List[ProfileOut], tags=["Listings"])
async def list_profiles(db=Depends(get_db)):
    profiles = db.list_profiles()
    if not profiles:
        raise NotFoundError()
    return [ProfileOut.model_validate(p) for p in profiles]
