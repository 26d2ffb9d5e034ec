"""Decision model: write-once ledger of learner actions."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from app.db.session import Base


class DecisionRecord(Base):
    __tablename__ = "decisions"
    __table_args__ = (UniqueConstraint("shift_id", "idempotency_key", name="uq_decisions_shift_idempotency"),)

    id = Column(String(64), primary_key=True)
    shift_id = Column(String(64), ForeignKey("shifts.id"), nullable=False, index=True)
    scenario_id = Column(String(64), ForeignKey("scenarios.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    action = Column(String(20), nullable=False)
    confidence = Column(Integer, nullable=False)  # 0-100
    outcome = Column(String(30), nullable=False)  # safe | compromised | delayed_work | false_alarm
    points_earned = Column(Integer, nullable=False)
    used_verification = Column(Boolean, nullable=False, default=False)
    idempotency_key = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
