"""Tracking link handler: validate, look up, record the click, render the redirect."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models import EVENT_SOURCE_TRACKING, EventType, RequestStatus, ReviewRequest
from services.pages import render_error_page, render_redirect_page
from services.store import find_request_by_tracking_id, insert_event, update_request_on_first_click

logger = logging.getLogger(__name__)

MIN_TRACKING_ID_LENGTH = 10
FALLBACK_REDIRECT_URL = "https://google.com/maps"


@dataclass
class ClientInfo:
    ip_address: str = "unknown"
    user_agent: str = "unknown"
    referer: str | None = None


@dataclass
class TrackingResult:
    status_code: int
    html: str
    is_first_click: bool = False


def resolve_redirect_url(review_request: ReviewRequest) -> str:
    """First non-empty of google_review_url, review_url, website, then the maps fallback."""
    business = review_request.business
    return (
        business.google_review_url
        or review_request.review_url
        or business.website
        or FALLBACK_REDIRECT_URL
    )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _error(status_code: int, title: str, message: str, submessage: str) -> TrackingResult:
    return TrackingResult(status_code, render_error_page(title, message, submessage))


def _record_first_click(db: Session, rr: ReviewRequest, tracking_uuid: str, client: ClientInfo, started: float) -> bool:
    """Update the request and insert its event in one transaction.

    Returns False if the conditional update found the click already recorded;
    nothing is written in that case.
    """
    customer = rr.customer
    now = datetime.now(timezone.utc)
    transitioned = update_request_on_first_click(
        db,
        rr.id,
        clicked_at=now,
        status=RequestStatus.CLICKED,
        click_metadata={
            "userAgent": client.user_agent,
            "ipAddress": client.ip_address,
            "referer": client.referer,
            "timestamp": now.isoformat(),
            "trackingServer": True,
            "responseTime": _elapsed_ms(started),
        },
    )
    if not transitioned:
        db.rollback()
        return False

    insert_event(
        db,
        business_id=rr.business_id,
        review_request_id=rr.id,
        type=EventType.REQUEST_CLICKED,
        source=EVENT_SOURCE_TRACKING,
        description=f"Review link clicked by {customer.first_name} {customer.last_name}",
        metadata={
            "trackingUuid": tracking_uuid,
            "customerEmail": customer.email,
            "userAgent": client.user_agent,
            "ipAddress": client.ip_address,
            "referer": client.referer,
            "trackingServer": True,
            "isFirstClick": True,
        },
    )
    db.commit()
    return True


def _record_repeat_click(db: Session, rr: ReviewRequest, tracking_uuid: str, client: ClientInfo, previous_click_at: datetime | None):
    customer = rr.customer
    insert_event(
        db,
        business_id=rr.business_id,
        review_request_id=rr.id,
        type=EventType.REQUEST_CLICKED,
        source=EVENT_SOURCE_TRACKING,
        description=f"Repeat click by {customer.first_name} {customer.last_name}",
        metadata={
            "trackingUuid": tracking_uuid,
            "repeatClick": True,
            "previousClickAt": _isoformat(previous_click_at),
            "userAgent": client.user_agent,
            "ipAddress": client.ip_address,
            "referer": client.referer,
            "trackingServer": True,
            "isFirstClick": False,
        },
    )
    db.commit()


def handle_tracking_request(db: Session, tracking_uuid: str, client: ClientInfo) -> TrackingResult:
    started = time.monotonic()
    logger.info("Tracking request received uuid=%s ip=%s user_agent=%s", tracking_uuid, client.ip_address, client.user_agent)

    # Length only; the identifier scheme is opaque to this service.
    if not isinstance(tracking_uuid, str) or len(tracking_uuid) < MIN_TRACKING_ID_LENGTH:
        logger.warning("Invalid tracking id format uuid=%s", tracking_uuid)
        return _error(
            400,
            "Invalid Link",
            "This tracking link appears to be malformed.",
            "Please check the link and try again.",
        )

    try:
        rr = find_request_by_tracking_id(db, tracking_uuid)
        if not rr:
            logger.warning("Unknown tracking id uuid=%s ip=%s", tracking_uuid, client.ip_address)
            return _error(
                404,
                "Link Not Found",
                "This review link is invalid or has expired.",
                "If you believe this is an error, please contact the business directly.",
            )

        if not rr.is_active or rr.status == RequestStatus.OPTED_OUT:
            logger.info("Inactive tracking link accessed uuid=%s status=%s is_active=%s", tracking_uuid, rr.status, rr.is_active)
            return _error(
                410,
                "Link Inactive",
                "This review request is no longer active.",
                "You may have already submitted your review or opted out of communications.",
            )

        # Read everything the page needs before commit expires the instance.
        redirect_url = resolve_redirect_url(rr)
        business_name = rr.business.name
        first_name = rr.customer.first_name
        full_name = f"{rr.customer.first_name} {rr.customer.last_name}"
        request_id, customer_id, business_id = rr.id, rr.customer_id, rr.business_id

        is_first_click = rr.clicked_at is None
        if is_first_click:
            is_first_click = _record_first_click(db, rr, tracking_uuid, client, started)
            if is_first_click:
                logger.info(
                    "First click tracked request_id=%s customer_id=%s business_id=%s response_time_ms=%s",
                    request_id, customer_id, business_id, _elapsed_ms(started),
                )
            else:
                # Lost the race to a concurrent first click; fall through as a repeat.
                db.refresh(rr)
                logger.info("First click already recorded concurrently request_id=%s", request_id)

        if not is_first_click:
            previous_click_at = rr.clicked_at
            logger.info("Repeat click detected request_id=%s previous_click_at=%s", request_id, _isoformat(previous_click_at))
            _record_repeat_click(db, rr, tracking_uuid, client, previous_click_at)

        logger.info(
            "Redirecting request_id=%s redirect_url=%s customer=%s total_response_time_ms=%s",
            request_id, redirect_url, full_name, _elapsed_ms(started),
        )
        html = render_redirect_page(business_name, redirect_url, first_name, is_first_click)
        return TrackingResult(200, html, is_first_click)

    except Exception:
        db.rollback()
        logger.exception("Tracking server error uuid=%s response_time_ms=%s", tracking_uuid, _elapsed_ms(started))
        return _error(
            500,
            "Something Went Wrong",
            "We encountered an error processing your request.",
            "Please try again later or contact the business directly.",
        )
