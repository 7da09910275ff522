from services.pages import render_error_page, render_redirect_page
from services.store import find_request_by_tracking_id, insert_event, update_request_on_first_click
from services.tracking import (
    FALLBACK_REDIRECT_URL,
    ClientInfo,
    TrackingResult,
    handle_tracking_request,
    resolve_redirect_url,
)

__all__ = [
    "FALLBACK_REDIRECT_URL",
    "ClientInfo",
    "TrackingResult",
    "find_request_by_tracking_id",
    "handle_tracking_request",
    "insert_event",
    "render_error_page",
    "render_redirect_page",
    "resolve_redirect_url",
    "update_request_on_first_click",
]
