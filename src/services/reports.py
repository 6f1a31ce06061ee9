"""Admin reports over paid jobs."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from src.utils.config_loader import ReportsConfig
from src.utils.date_range import parse_date_range

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, store, config: Optional[ReportsConfig] = None):
        self.store = store
        self.config = config or ReportsConfig()

    def best_profession(self, start: Optional[str], end: Optional[str]) -> List[Dict[str, Any]]:
        """The profession that earned the most in the range, as a list of at most one entry."""
        start_dt, end_dt = parse_date_range(start, end)
        best = self.store.best_profession(start_dt, end_dt)
        logger.info("Best profession %s..%s: %s", start_dt, end_dt, best["profession"] if best else None)
        return [best] if best else []

    def best_clients(self, start: Optional[str], end: Optional[str], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        start_dt, end_dt = parse_date_range(start, end)
        if limit is None:
            limit = self.config.default_best_clients_limit
        limit = min(limit, self.config.max_best_clients_limit)
        return self.store.best_clients(start_dt, end_dt, limit)
