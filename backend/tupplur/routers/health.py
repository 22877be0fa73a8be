"""
Health check router for liveness and readiness probes.
"""
from fastapi import APIRouter, status

from tupplur.config import get_settings
from tupplur.database.connections import get_kv_store

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that verifies the key-value backend.
    Returns 200 with a degraded status if the backend is unreachable.
    """
    backend = get_settings().kv_backend
    checks = {
        "api": "healthy",
        backend: "unknown",
    }

    try:
        store = await get_kv_store()
        await store.ping()
        checks[backend] = "healthy"
    except Exception as e:
        checks[backend] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
