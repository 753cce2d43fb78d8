"""SQLAlchemy ORM models.

Users, properties, inspections and photos are owned by collaborator
subsystems; comparisons, differences, credit rows and jobs are written here.
"""

from app.models.base import Base
from app.models.user import User, UserSettings
from app.models.property import Property
from app.models.inspection import Inspection, InspectionPhoto
from app.models.comparison import Comparison, ComparisonDifference
from app.models.credit import CreditUsage, CreditReservation
from app.models.job import ComparisonJob

__all__ = [
    "Base", "User", "UserSettings", "Property",
    "Inspection", "InspectionPhoto",
    "Comparison", "ComparisonDifference",
    "CreditUsage", "CreditReservation",
    "ComparisonJob",
]
