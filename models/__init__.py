from models.teacher import Teacher
from models.course import Course, Unit
from models.plan import PlanData
from models.account import AccountRecord, BackupDocument, SessionPointer

__all__ = [
    "Teacher",
    "Course",
    "Unit",
    "PlanData",
    "AccountRecord",
    "BackupDocument",
    "SessionPointer",
]
