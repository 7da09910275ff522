"""Data access used by the tracking handler. Helpers flush but never commit."""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from models import Event, ReviewRequest


def find_request_by_tracking_id(db: Session, tracking_uuid: str) -> ReviewRequest | None:
    return (
        db.query(ReviewRequest)
        .options(joinedload(ReviewRequest.customer), joinedload(ReviewRequest.business))
        .filter(ReviewRequest.tracking_uuid == tracking_uuid)
        .first()
    )


def update_request_on_first_click(
    db: Session,
    request_id: int,
    clicked_at: datetime,
    status: str,
    click_metadata: dict,
) -> bool:
    """Set the first-click fields only while clicked_at is still NULL.

    Returns False when another transaction already recorded the click.
    """
    result = db.execute(
        update(ReviewRequest)
        .where(ReviewRequest.id == request_id, ReviewRequest.clicked_at.is_(None))
        .values(clicked_at=clicked_at, status=status, click_metadata=click_metadata)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def insert_event(
    db: Session,
    business_id: int,
    review_request_id: int,
    type: str,
    source: str,
    description: str,
    metadata: dict,
) -> Event:
    event = Event(
        business_id=business_id,
        review_request_id=review_request_id,
        type=type,
        source=source,
        description=description,
        event_metadata=metadata,
    )
    db.add(event)
    db.flush()
    return event
