import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # email is never updated after registration
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)

    industry = Column(String(100))
    size = Column(String(50))
    website = Column(String(255))
    description = Column(Text)
    headquarters = Column(String(200))
    founded_year = Column(Integer)
    phone = Column(String(20))
    address = Column(String(200))
    city = Column(String(100))
    state = Column(String(100))
    country = Column(String(100))

    contact_person_name = Column(String(255))
    contact_person_title = Column(String(255))
    contact_person_email = Column(String(255))
    contact_person_phone = Column(String(20))

    is_verified = Column(Boolean, default=False, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    profile_completed = Column(Boolean, default=False, nullable=False)
    rejection_reason = Column(String(500))
    reviewed_at = Column(DateTime(timezone=True))
    reviewed_by = Column(String(64))

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def mark_approved(self, admin_id: str):
        self.is_verified = True
        self.rejection_reason = None
        self.reviewed_at = _utcnow()
        self.reviewed_by = admin_id

    def mark_rejected(self, reason: str, admin_id: str):
        self.is_verified = False
        self.rejection_reason = reason
        self.reviewed_at = _utcnow()
        self.reviewed_by = admin_id
