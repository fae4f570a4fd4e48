"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness check."""
    return {"status": "healthy", "service": "fieldops-web"}
