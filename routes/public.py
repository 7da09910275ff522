"""Public routes: health, service info, and the tracking redirect."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from database import get_db
from services import ClientInfo, handle_tracking_request

SERVICE_NAME = "review-runner-tracking"
SERVICE_VERSION = "1.0.0"

router = APIRouter()


def client_info(request: Request) -> ClientInfo:
    """Client details recorded with each click. Proxy headers win over the socket peer."""
    headers = request.headers
    peer = request.client.host if request.client else None
    return ClientInfo(
        ip_address=headers.get("x-forwarded-for") or headers.get("x-real-ip") or peer or "unknown",
        user_agent=headers.get("user-agent") or "unknown",
        referer=headers.get("referer"),
    )


@router.get("/health")
def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/")
def root():
    return {
        "message": "Review Runner Tracking Server",
        "endpoints": {
            "health": "/health",
            "track": "/:uuid",
        },
    }


@router.get("/{tracking_uuid}", response_class=HTMLResponse)
def track(tracking_uuid: str, request: Request, db: Session = Depends(get_db)):
    result = handle_tracking_request(db, tracking_uuid, client_info(request))
    return HTMLResponse(result.html, status_code=result.status_code)
