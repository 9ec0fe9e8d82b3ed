"""Database reachability and schema-drift probe."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from fastapi import Depends
from postgrest.exceptions import APIError
from supabase import Client

from src.db.client import get_supabase
from src.db.models import PG_UNDEFINED_COLUMN, SCHEMA_PROBES, USERS

logger = logging.getLogger(__name__)


class SchemaStatus(Enum):
    OK = "ok"
    WARNING = "warning"


@dataclass
class HealthReport:
    database_ok: bool
    schema_issues: list[dict] = field(default_factory=list)

    @property
    def schema_status(self) -> SchemaStatus:
        return SchemaStatus.WARNING if self.schema_issues else SchemaStatus.OK

    def to_dict(self) -> dict:
        if not self.database_ok:
            return {
                "status": "error",
                "message": "Database connection issues. Please try again later.",
            }
        return {
            "status": "ok",
            "schema_status": self.schema_status.value,
            "schema_issues": self.schema_issues,
            "message": (
                "Server is healthy, but the database schema needs updates. Some features may not work correctly."
                if self.schema_issues else "Server is healthy"
            ),
        }


class HealthChecker:
    """Probe the users table, then each column older deployments may be missing."""

    def __init__(self, db: Client):
        self._db = db

    def check(self) -> HealthReport:
        try:
            self._db.table(USERS).select("id").limit(1).execute()
        except Exception:
            logger.error("Health check: database unreachable", exc_info=True)
            return HealthReport(database_ok=False)

        report = HealthReport(database_ok=True)
        for table, column in SCHEMA_PROBES:
            try:
                self._db.table(table).select(column).limit(1).execute()
            except APIError as exc:
                if exc.code != PG_UNDEFINED_COLUMN:
                    raise
                logger.warning("Missing column: %s.%s", table, column)
                report.schema_issues.append({"type": "column", "table": table, "column": column})
        return report


def get_health_checker(db: Client = Depends(get_supabase)) -> HealthChecker:
    return HealthChecker(db)
