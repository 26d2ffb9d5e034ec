"""Scenario model: one simulated message with its ground truth and precomputed difficulty."""
from sqlalchemy import JSON, Column, Integer, String, Text

from app.db.session import Base


class ScenarioRecord(Base):
    __tablename__ = "scenarios"

    id = Column(String(64), primary_key=True)
    channel = Column(String(20), nullable=False)  # email | sms | call | chat
    sender_name = Column(String(255), nullable=False, default="")
    sender_address = Column(String(255), nullable=True)
    subject = Column(String(500), nullable=True)
    body = Column(Text, nullable=False, default="")

    legitimacy = Column(String(30), nullable=False)  # legitimate | suspicious_legitimate | malicious
    correct_action = Column(String(20), nullable=False)  # report | delete | verify | proceed
    attack_family = Column(String(30), nullable=True)
    risk_type = Column(String(30), nullable=False, default="none")
    cues = Column(JSON, nullable=False, default=list)
    premise_factors = Column(JSON, nullable=False, default=list)
    explanation = Column(Text, nullable=False, default="")
    difficulty_score = Column(Integer, nullable=False, default=1)  # 1-5, set once at ingestion

    chain_id = Column(String(100), nullable=True, index=True)
    chain_order = Column(Integer, nullable=True)
    chain_name = Column(String(255), nullable=True)
    previous_action = Column(String(20), nullable=True)
