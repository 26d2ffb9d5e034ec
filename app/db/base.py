"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.decision import DecisionRecord  # noqa: F401
from app.models.progress import ProgressRecord  # noqa: F401
from app.models.scenario import ScenarioRecord  # noqa: F401
from app.models.shift import ShiftRecord  # noqa: F401

__all__ = ["Base", "ScenarioRecord", "ShiftRecord", "ProgressRecord", "DecisionRecord"]
