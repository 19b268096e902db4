"""
Health check API routes.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException

from ...config import settings
from ...services import http_client_service
from ..dependencies import get_case_store, get_extractor, get_notifier, get_scheduler

router = APIRouter()


@router.get("/")
async def health_check():
    """Service health check"""
    try:
        response = await http_client_service.client.get(
            f"{settings.BACKEND_URL}/",
            headers=http_client_service.get_auth_headers()
        )
        response.raise_for_status()

        return {
            "status": "operational",
            "timestamp": datetime.now().isoformat(),
            "backend": "connected"
        }
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Backend unavailable: {str(e)}")


@router.get("/status")
async def service_status(
    store=Depends(get_case_store),
    extractor=Depends(get_extractor),
    scheduler=Depends(get_scheduler),
    notifier=Depends(get_notifier)
):
    """Report which collaborators are configured"""
    return {
        "status": "operational",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now().isoformat(),
        "services": {
            "case_store": store.is_available(),
            "extractor": extractor.is_available(),
            "calendar": scheduler.is_available(),
            "email": notifier.is_available()
        }
    }
