from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from .base import Base
from .company import _utcnow

FIRST_STEP = 1
DETAILS_STEP = 3
SUBMITTED_STEP = 4


class CompanyProfileStep(Base):
    __tablename__ = "company_profile_steps"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(String(36), ForeignKey("companies.id"), unique=True, nullable=False)
    basic_info_completed = Column(Boolean, default=False, nullable=False)
    company_details_completed = Column(Boolean, default=False, nullable=False)
    contact_info_completed = Column(Boolean, default=False, nullable=False)
    current_step = Column(Integer, default=FIRST_STEP, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def submitted(self) -> bool:
        return self.current_step >= SUBMITTED_STEP

    def advance_to(self, step: int):
        # current_step never moves backwards
        if step > (self.current_step or FIRST_STEP):
            self.current_step = step
