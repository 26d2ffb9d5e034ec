"""Training engine errors. Each carries an error code and the offending field."""


class TrainingError(Exception):
    """Base for every error the training engine surfaces to its caller."""

    code = "training_error"
    field: str | None = None
    status_code = 400

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field

    def to_dict(self) -> dict:
        return {"error": self.code, "field": self.field, "message": self.message}


class InvalidAction(TrainingError):
    code = "invalid_action"
    field = "action"

    def __init__(self, action):
        super().__init__(f"Unknown action: {action!r}")
        self.action = action


class InvalidConfidence(TrainingError):
    code = "invalid_confidence"
    field = "confidence"

    def __init__(self, confidence):
        super().__init__(f"Confidence must be between 0 and 100, got {confidence!r}")
        self.confidence = confidence


class VerificationBudgetExhausted(TrainingError):
    code = "verification_budget_exhausted"
    field = "action"
    status_code = 409

    def __init__(self, shift_id: str, budget: int):
        super().__init__(f"No verifications remaining in shift {shift_id} (budget {budget})")
        self.shift_id = shift_id
        self.budget = budget


class UnknownScenario(TrainingError):
    code = "unknown_scenario"
    field = "scenario_id"
    status_code = 404

    def __init__(self, scenario_id: str):
        super().__init__(f"Scenario not found: {scenario_id}")
        self.scenario_id = scenario_id


class UnknownSession(TrainingError):
    code = "unknown_session"
    field = "shift_id"
    status_code = 404

    def __init__(self, shift_id: str):
        super().__init__(f"Shift not found: {shift_id}")
        self.shift_id = shift_id


class ScenarioNotInShift(TrainingError):
    code = "scenario_not_in_shift"
    field = "scenario_id"
    status_code = 409

    def __init__(self, shift_id: str, scenario_id: str):
        super().__init__(f"Scenario {scenario_id} is not part of shift {shift_id}")
        self.shift_id = shift_id
        self.scenario_id = scenario_id


class ScenarioAlreadyDecided(TrainingError):
    code = "scenario_already_decided"
    field = "scenario_id"
    status_code = 409

    def __init__(self, shift_id: str, scenario_id: str):
        super().__init__(f"Scenario {scenario_id} already has a decision in shift {shift_id}")
        self.shift_id = shift_id
        self.scenario_id = scenario_id


class ShiftCompleted(TrainingError):
    code = "shift_completed"
    field = "shift_id"
    status_code = 409

    def __init__(self, shift_id: str):
        super().__init__(f"Shift {shift_id} is already completed")
        self.shift_id = shift_id


class ConcurrentUpdate(TrainingError):
    code = "concurrent_update"
    field = "version"
    status_code = 409

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} was modified concurrently")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientPool(TrainingError):
    code = "insufficient_pool"
    field = "size"
    status_code = 503

    def __init__(self, requested: int, batch: list | None = None):
        batch = list(batch or [])
        super().__init__(f"Scenario pool supplied {len(batch)} of {requested} requested scenarios")
        self.requested = requested
        self.batch = batch
