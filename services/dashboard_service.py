"""Aggregation behind the landing page dashboard.

The dashboard shows every part, service and tool, newest first. The three
collections are unrelated, so the reads are issued concurrently and joined:
the page is built only when all three succeed. The first failing read (or
the timeout) aborts the whole aggregate and ``StoreQueryFailure`` is raised;
partial results are never returned.

There is no snapshot across collections: a record inserted while the reads
are in flight may show up in one list and not in another.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Dict, List

from config.settings import DASHBOARD_TIMEOUT
from domain.models.catalog import Part, Service, Tool
from middleware.errors import StoreQueryFailure
from repositories.catalog_repository import (
    CatalogRepository,
    PartRepository,
    ServiceRepository,
    ToolRepository,
)


logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    """The three newest-first listings rendered on the home page."""

    parts: List[Part] = field(default_factory=list)
    services: List[Service] = field(default_factory=list)
    tools: List[Tool] = field(default_factory=list)

    def as_context(self) -> Dict[str, List[Any]]:
        return {"parts": self.parts, "services": self.services, "tools": self.tools}

    def to_json(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            key: [item.to_json() for item in items]
            for key, items in self.as_context().items()
        }


class DashboardService:
    """Join of three independent ``find_all`` reads."""

    def __init__(
        self,
        parts: CatalogRepository,
        services: CatalogRepository,
        tools: CatalogRepository,
        *,
        timeout: float | None = DASHBOARD_TIMEOUT,
    ) -> None:
        self._sources: Dict[str, CatalogRepository] = {
            "parts": parts,
            "services": services,
            "tools": tools,
        }
        self._timeout = timeout

    @classmethod
    def from_db(cls, db, *, timeout: float | None = DASHBOARD_TIMEOUT) -> "DashboardService":
        return cls(
            PartRepository(db),
            ServiceRepository(db),
            ToolRepository(db),
            timeout=timeout,
        )

    def get_dashboard(self) -> Dashboard:
        """Fetch all three collections; fail as a whole on the first error."""

        executor = ThreadPoolExecutor(
            max_workers=len(self._sources), thread_name_prefix="dashboard"
        )
        try:
            futures: Dict[Future, str] = {
                executor.submit(repo.find_all): key
                for key, repo in self._sources.items()
            }
            done, pending = wait(
                futures, timeout=self._timeout, return_when=FIRST_EXCEPTION
            )

            for future in done:
                exc = future.exception()
                if exc is not None:
                    self._raise_for(futures[future], exc)

            if pending:
                missing = sorted(futures[f] for f in pending)
                logger.error("Dashboard reads timed out after %ss: %s", self._timeout, missing)
                raise StoreQueryFailure(
                    "Timed out reading the dashboard collections",
                    details={"pending": missing, "timeout": self._timeout},
                )

            results = {futures[f]: f.result() for f in done}
        finally:
            # In-flight reads are abandoned, never awaited, on failure.
            executor.shutdown(wait=False, cancel_futures=True)

        return Dashboard(**results)

    @staticmethod
    def _raise_for(key: str, exc: BaseException) -> None:
        logger.error("Dashboard read of %s failed: %s", key, exc)
        if isinstance(exc, StoreQueryFailure):
            raise exc
        raise StoreQueryFailure(
            f"Failed to read {key}", details={"collection": key}
        ) from exc


def fetch_dashboard(db, *, timeout: float | None = DASHBOARD_TIMEOUT) -> Dashboard:
    """Convenience wrapper used by the routes."""
    return DashboardService.from_db(db, timeout=timeout).get_dashboard()


__all__ = ["Dashboard", "DashboardService", "fetch_dashboard"]
