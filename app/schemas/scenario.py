"""Pydantic schemas for scenarios: the immutable fact sheet for one simulated message."""
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    CALL = "call"
    CHAT = "chat"


class Legitimacy(str, Enum):
    LEGITIMATE = "legitimate"
    SUSPICIOUS_LEGITIMATE = "suspicious_legitimate"
    MALICIOUS = "malicious"


class ActionType(str, Enum):
    REPORT = "report"
    DELETE = "delete"
    VERIFY = "verify"
    PROCEED = "proceed"


class OutcomeType(str, Enum):
    SAFE = "safe"
    COMPROMISED = "compromised"
    DELAYED_WORK = "delayed_work"
    FALSE_ALARM = "false_alarm"


def new_id() -> str:
    return str(uuid.uuid4())


class ScenarioDraft(BaseModel):
    """Authoring input for a scenario; difficulty is computed on ingestion."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(default_factory=new_id)
    channel: Channel = Channel.EMAIL
    sender_name: str = ""
    sender_address: str | None = None
    subject: str | None = None
    body: str = ""
    legitimacy: Legitimacy
    correct_action: ActionType
    attack_family: str | None = None  # phishing, bec, smishing, vishing, ...
    risk_type: str = "none"
    cues: tuple[str, ...] = ()
    premise_factors: tuple[str, ...] = ()
    explanation: str = ""
    # Multi-step chains
    chain_id: str | None = None
    chain_order: int | None = Field(default=None, ge=1)
    chain_name: str | None = None
    previous_action: ActionType | None = None  # action on the previous step that unlocks this one


class Scenario(ScenarioDraft):
    difficulty_score: int = Field(ge=1, le=5)

    @property
    def is_chain_start(self) -> bool:
        """True unless this is a follow-up step of a chain."""
        return self.chain_order is None or self.chain_order == 1

    @property
    def is_malicious(self) -> bool:
        return self.legitimacy == Legitimacy.MALICIOUS


class ScenarioOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    channel: Channel
    sender_name: str
    sender_address: str | None = None
    subject: str | None = None
    body: str
    difficulty_score: int
    chain_id: str | None = None
    chain_order: int | None = None
    chain_name: str | None = None


class ScenarioRevealSchema(ScenarioOutSchema):
    """Scenario with ground truth, shown once the learner has acted on it."""

    legitimacy: Legitimacy
    correct_action: ActionType
    attack_family: str | None = None
    cues: list[str]
    explanation: str
