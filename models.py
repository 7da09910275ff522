from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base


class RequestStatus:
    PENDING = "PENDING"
    QUEUED = "QUEUED"
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    CLICKED = "CLICKED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    BOUNCED = "BOUNCED"
    OPTED_OUT = "OPTED_OUT"


class EventType:
    REQUEST_CLICKED = "REQUEST_CLICKED"


EVENT_SOURCE_TRACKING = "tracking_server"


def _utcnow():
    return datetime.now(timezone.utc)


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    google_review_url = Column(String, nullable=True)
    website = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    customers = relationship("Customer", back_populates="business")
    review_requests = relationship("ReviewRequest", back_populates="business")


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    business = relationship("Business", back_populates="customers")
    review_requests = relationship("ReviewRequest", back_populates="customer")


class ReviewRequest(Base):
    __tablename__ = "review_requests"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    tracking_uuid = Column(String, unique=True, index=True, nullable=False)
    status = Column(String, nullable=False, default=RequestStatus.PENDING)  # PENDING -> SENT -> CLICKED
    is_active = Column(Boolean, nullable=False, default=True)
    review_url = Column(String, nullable=True)
    clicked_at = Column(DateTime(timezone=True), nullable=True)
    click_metadata = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    business = relationship("Business", back_populates="review_requests")
    customer = relationship("Customer", back_populates="review_requests")
    events = relationship("Event", back_populates="review_request")


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    review_request_id = Column(Integer, ForeignKey("review_requests.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    source = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    review_request = relationship("ReviewRequest", back_populates="events")
