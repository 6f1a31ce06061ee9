import os
import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, Request
from dotenv import load_dotenv

from src.services.errors import UnauthenticatedError
from src.services.payments import PaymentService
from src.services.reports import ReportService
from src.utils.config_loader import MarketplaceConfig

load_dotenv()

logger = logging.getLogger(__name__)

# Will be set by main.py after import
marketplace_store = None
marketplace_config: MarketplaceConfig = MarketplaceConfig()


def get_db():
    """Dependency for the marketplace store"""
    return marketplace_store


def get_config() -> MarketplaceConfig:
    return marketplace_config


def get_payment_service(db=Depends(get_db), config: MarketplaceConfig = Depends(get_config)) -> PaymentService:
    return PaymentService(db, deposit_cap_ratio=config.payments.deposit_cap_ratio)


def get_report_service(db=Depends(get_db), config: MarketplaceConfig = Depends(get_config)) -> ReportService:
    return ReportService(db, config.reports)


async def get_profile(
    profile_id: Optional[str] = Header(default=None, alias="profile_id", convert_underscores=False),
    db=Depends(get_db),
):
    """Resolve the `profile_id` header to the calling profile."""
    try:
        pid = int((profile_id or "").strip())
    except ValueError:
        raise UnauthenticatedError() from None
    profile = db.get_profile(pid)
    if profile is None:
        logger.info("Unknown caller profile_id=%s", pid)
        raise UnauthenticatedError()
    return profile


def get_admin_api_keys():
    keys = os.getenv("ADMIN_API_KEYS", "")
    return [k.strip() for k in keys.split(",") if k.strip()]


async def admin_key_protection(
    request: Request = None,  # keep Request type so FastAPI injects it; default None for direct calls/tests
    x_api_key: str = Header(default=None, alias="X-API-KEY"),
):
    valid_keys = get_admin_api_keys()
    if not valid_keys:
        # No keys configured: admin routes are open (local development)
        return

    path = request.url.path if request is not None else "<no-request>"
    candidate = (x_api_key or "").strip()
    ok = bool(candidate) and any(hmac.compare_digest(candidate, k) for k in valid_keys)
    if not ok:
        logger.warning("Admin API key check failed: path=%s header_present=%s", path, bool(x_api_key))
        raise UnauthenticatedError("Invalid or missing API Key")
