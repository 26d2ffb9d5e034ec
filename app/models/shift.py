"""Shift model: one learner's batch of scenarios with verification budget and running totals."""
from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.db.session import Base


class ShiftRecord(Base):
    __tablename__ = "shifts"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    scenario_ids = Column(JSON, nullable=False, default=list)  # ordered
    verification_budget = Column(Integer, nullable=False, default=3)
    verifications_used = Column(Integer, nullable=False, default=0)
    score = Column(Integer, nullable=False, default=0)
    correct_decisions = Column(Integer, nullable=False, default=0)
    false_positives = Column(Integer, nullable=False, default=0)
    compromised = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
