"""Health endpoint with database and schema status."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.health.service import HealthChecker, get_health_checker

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", summary="Health check", description="Database reachability plus any columns missing from the schema. 503 when the database cannot be reached.")
async def health(checker: HealthChecker = Depends(get_health_checker)):
    report = checker.check()
    if not report.database_ok:
        return JSONResponse(status_code=503, content=report.to_dict())
    return report.to_dict()
