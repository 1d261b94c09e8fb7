from fastapi import APIRouter, HTTPException, Request
from datetime import datetime, timezone
import logging
import psutil

router = APIRouter()
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def basic_health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/healthz")
async def health_alias():
    """Health check alias for platforms that expect /healthz."""
    return await basic_health_check()


@router.get("/readyz")
async def readiness_check(request: Request):
    """
    Readiness check for container orchestration.
    Returns 200 once the upstream LLM provider is usable.
    """
    settings = request.app.state.settings
    provider = request.app.state.provider
    checks = {}

    if settings.has_api_key:
        checks["openrouter"] = {"status": "configured", "model": provider.model}
    else:
        checks["openrouter"] = {"status": "unconfigured", "error": "OPENROUTER_API_KEY is not set"}

    all_healthy = all(c["status"] == "configured" for c in checks.values())
    response_data = {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks,
        "timestamp": _now(),
    }

    if not all_healthy:
        raise HTTPException(status_code=503, detail=response_data)

    return response_data


@router.get("/livez")
async def liveness_check():
    """
    Liveness check.
    Should only fail if the process is in an unrecoverable state.
    """
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')
    disk_percent = (disk.used / disk.total) * 100

    problem = None
    if memory.percent > 95:
        problem = f"Critical memory usage: {memory.percent}%"
    elif disk_percent > 95:
        problem = f"Critical disk usage: {disk_percent:.1f}%"

    if problem:
        logger.critical(f"Liveness check failed: {problem}")
        raise HTTPException(status_code=503, detail=f"Application not alive: {problem}")

    return {
        "status": "alive",
        "memory_percent": memory.percent,
        "disk_percent": round(disk_percent, 1),
        "timestamp": _now(),
    }
