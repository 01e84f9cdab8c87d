"""
ORM models. Importing this package registers every table with Base.metadata
(Alembic autogenerate and init_models() depend on that).
"""

from puff.models.consumption_session import ConsumptionSession
from puff.models.strain import Strain
from puff.models.symptom_log import SymptomLog
from puff.models.tolerance_break import ToleranceBreak
from puff.models.user import User

__all__ = [
    "ConsumptionSession",
    "Strain",
    "SymptomLog",
    "ToleranceBreak",
    "User",
]
