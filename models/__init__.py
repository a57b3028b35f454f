from models.weekday import Weekday
from models.timeslot import TimeSlot, Availability
from models.tutor import Tutor
from models.session import Session, SessionStatus
from models.tutoring_class import TutoringClass, ClassStatus
from models.enrollment import Enrollment, EnrollmentStatus
from models.allocation import ResourceAllocation, WorkloadTier
from models.inefficiency import (
    InefficiencyReport,
    InefficiencyType,
    ResourceInefficiency,
    Severity,
)
from models.plan import (
    AdjustGroupSize,
    ApplyResult,
    ChangeFailure,
    ChangeType,
    EstimatedImpact,
    ModifySchedule,
    OptimizationChange,
    OptimizationPlan,
    PlanConstraints,
    PlanStatus,
    ReallocateSession,
    ReallocateStudent,
)

__all__ = [
    "Weekday",
    "TimeSlot",
    "Availability",
    "Tutor",
    "Session",
    "SessionStatus",
    "TutoringClass",
    "ClassStatus",
    "Enrollment",
    "EnrollmentStatus",
    "ResourceAllocation",
    "WorkloadTier",
    "InefficiencyReport",
    "InefficiencyType",
    "ResourceInefficiency",
    "Severity",
    "AdjustGroupSize",
    "ApplyResult",
    "ChangeFailure",
    "ChangeType",
    "EstimatedImpact",
    "ModifySchedule",
    "OptimizationChange",
    "OptimizationPlan",
    "PlanConstraints",
    "PlanStatus",
    "ReallocateSession",
    "ReallocateStudent",
]
