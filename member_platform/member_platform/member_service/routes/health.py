"""
Health check endpoints for the Member Service
"""
from fastapi import APIRouter, Depends, HTTPException, status
from datetime import datetime
from typing import Dict, Any

from ..dependencies import get_store
from ..gateway import UserStoreGateway

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(store: UserStoreGateway = Depends(get_store)) -> Dict[str, Any]:
    """
    Readiness check reporting the member store connection state.

    Raises:
        HTTPException: 503 if the store is not connected
    """
    snapshot = store.monitor.snapshot()
    is_ready = store.monitor.is_ready

    response = {
        "status": "ready" if is_ready else "not_ready",
        "message": "Service ready" if is_ready else "Database connection not ready",
        "database": snapshot["state"],
        "attempts": snapshot["attempts"],
        "timestamp": datetime.utcnow().isoformat()
    }

    if not is_ready:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response
        )

    return response
