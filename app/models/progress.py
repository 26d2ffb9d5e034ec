"""Progress model: one per learner. Cumulative counters, streaks, missed cues, badges."""
from sqlalchemy import JSON, Column, DateTime, Integer, String

from app.db.session import Base


class ProgressRecord(Base):
    __tablename__ = "user_progress"

    user_id = Column(String(64), primary_key=True)

    total_shifts = Column(Integer, nullable=False, default=0)
    total_decisions = Column(Integer, nullable=False, default=0)
    correct_decisions = Column(Integer, nullable=False, default=0)
    false_positives = Column(Integer, nullable=False, default=0)
    compromised = Column(Integer, nullable=False, default=0)
    malicious_seen = Column(Integer, nullable=False, default=0)
    malicious_handled = Column(Integer, nullable=False, default=0)
    legitimate_seen = Column(Integer, nullable=False, default=0)
    legitimate_handled = Column(Integer, nullable=False, default=0)
    reports_made = Column(Integer, nullable=False, default=0)
    correct_reports = Column(Integer, nullable=False, default=0)
    high_confidence_errors = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)  # consecutive correct decisions
    longest_streak = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    missed_cues = Column(JSON, nullable=False, default=dict)  # cue label -> times missed
    earned_badges = Column(JSON, nullable=False, default=list)
    last_played_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
