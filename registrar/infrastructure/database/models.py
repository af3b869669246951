# registrar/infrastructure/database/models.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from registrar.domain.models.enrollment import DEFAULT_ENROLLMENT_STATUS, Grade
from registrar.infrastructure.database.session import Base

_GRADE_CODES = ", ".join(f"'{g.value}'" for g in Grade)


class StudentRow(Base):
    """Student directory entry. Owned by an external collaborator; read-only here."""

    __tablename__ = "student"

    student_id = Column(String(10), primary_key=True)
    dept_id = Column(String(5), nullable=True)


class CourseOfferingRow(Base):
    """Course offering directory entry. max_capacity NULL means unlimited seats."""

    __tablename__ = "course_offering"

    offering_id = Column(String(15), primary_key=True)
    course_id = Column(String(10), nullable=True)
    semester_id = Column(String(10), nullable=True)
    faculty_id = Column(String(10), nullable=True)
    max_capacity = Column(Integer, nullable=True)


class EnrollmentRow(Base):
    __tablename__ = "enrollment"
    __table_args__ = (
        UniqueConstraint("student_id", "offering_id", name="uq_enrollment_student_offering"),
        CheckConstraint(f"grade IS NULL OR grade IN ({_GRADE_CODES})", name="ck_enrollment_grade"),
    )

    enrollment_id = Column(String(40), primary_key=True)
    student_id = Column(String(10), ForeignKey("student.student_id"), nullable=False)
    offering_id = Column(
        String(15), ForeignKey("course_offering.offering_id"), nullable=False, index=True
    )
    enrollment_date = Column(Date, nullable=False)
    grade = Column(String(2), nullable=True)
    status = Column(String(20), nullable=False, default=DEFAULT_ENROLLMENT_STATUS)


class EnrollmentAuditRow(Base):
    """Append-only. No foreign key to enrollment: entries outlive a deleted row."""

    __tablename__ = "enrollment_audit"

    audit_id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(String(40), nullable=False, index=True)
    student_id = Column(String(10), nullable=False)
    offering_id = Column(String(15), nullable=False)
    action_type = Column(String(10), nullable=False)
    action_date = Column(DateTime(timezone=True), nullable=False)
    changed_by = Column(String(100), nullable=False)
