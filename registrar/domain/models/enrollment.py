"""Domain model for enrollments and their audit stream. Pure business semantics — no ORM or infrastructure."""

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from registrar.domain.exceptions import InvalidGradeError

DEFAULT_ENROLLMENT_STATUS = "Active"
ENROLLMENT_ID_PREFIX = "ENR"


class Grade(str, Enum):
    """Closed set of letter grades an enrollment may carry."""

    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    F = "F"
    INCOMPLETE = "I"
    WITHDRAWN = "W"

    @classmethod
    def parse(cls, code: Optional[str]) -> Optional["Grade"]:
        """
        Map a raw grade code to a Grade. None clears the grade.
        Matching is exact; raises InvalidGradeError for anything else.
        """
        if code is None:
            return None
        if isinstance(code, cls):
            return code
        try:
            return cls(code)
        except ValueError as e:
            raise InvalidGradeError(f"Invalid grade provided: {code!r}") from e

    @classmethod
    def is_valid_code(cls, code: Optional[str]) -> bool:
        return code is None or code in cls._value2member_map_


class AuditAction(str, Enum):
    """Kind of enrollment mutation captured in the audit stream."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class OfferingInfo:
    """Directory facts about a course offering. capacity None means unlimited."""

    exists: bool
    capacity: Optional[int] = None
    current_count: int = 0

    @property
    def is_full(self) -> bool:
        if self.capacity is None:
            return False
        return self.current_count >= self.capacity

    @classmethod
    def missing(cls) -> "OfferingInfo":
        return cls(exists=False)


@dataclass(frozen=True)
class Enrollment:
    """A student's seat in one course offering."""

    enrollment_id: str
    student_id: str
    offering_id: str
    enrollment_date: date
    grade: Optional[Grade] = None
    status: str = DEFAULT_ENROLLMENT_STATUS


@dataclass(frozen=True)
class EnrollmentAudit:
    """
    Immutable audit entry: which enrollment, what happened, who, when (UTC).
    audit_id is assigned by the store on append.
    """

    enrollment_id: str
    student_id: str
    offering_id: str
    action: AuditAction
    actor: str
    timestamp_utc: datetime
    audit_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "audit_id": self.audit_id,
            "enrollment_id": self.enrollment_id,
            "student_id": self.student_id,
            "offering_id": self.offering_id,
            "action": self.action.value,
            "actor": self.actor,
            "timestamp_utc": self.timestamp_utc.isoformat(),
        }


def new_enrollment_id() -> str:
    """Fresh enrollment identifier from a random UUID; writers never coordinate."""
    return f"{ENROLLMENT_ID_PREFIX}{uuid.uuid4().hex.upper()}"
