"""Error rendering helpers for the request boundary."""
from typing import Any, Dict, Sequence, Tuple
import logging

from fastapi.encoders import jsonable_encoder

from src.services.errors import MarketplaceError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def render(self, exc: MarketplaceError) -> Tuple[int, Dict[str, Any]]:
        body = {**jsonable_encoder(exc.payload), "message": exc.message}
        return exc.status_code, body

    def render_validation(self, errors: Sequence[Dict[str, Any]]) -> Tuple[int, Dict[str, Any]]:
        """Request validation errors as a `message` plus the per-field details."""
        parts = []
        for err in errors:
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value"))
        message = "Invalid request: " + "; ".join(parts) if parts else "Invalid request"
        return 422, {"message": message, "details": jsonable_encoder(errors)}

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception while serving request: %s (context=%s)", exc, context or {}, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
        }
