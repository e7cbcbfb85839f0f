"""
Student model representing one row of the roster.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

StudentStatus = Literal["Active", "Inactive"]

STATUS_ACTIVE: StudentStatus = "Active"
STATUS_INACTIVE: StudentStatus = "Inactive"


class Student(BaseModel):
    """
    A single student record.

    Only field types and the status enumeration are enforced here. Business
    rules (lengths, ranges, charsets) are checked by StudentValidator so that
    every violation can be reported at once instead of failing on the first.

    Attributes:
        student_id: Unique key, immutable once the record is stored
        full_name: Student's full name
        programme: Programme of study
        level: Academic level (100..700 in steps of 100)
        gpa: Grade point average (0.0-4.0)
        email: Contact email
        phone_number: Contact phone number, digits only
        date_added: Date the record was created
        status: "Active" or "Inactive"
    """

    student_id: str
    full_name: str
    programme: str
    level: int
    gpa: float
    email: str
    phone_number: str
    date_added: date = Field(default_factory=date.today)
    status: StudentStatus = STATUS_ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def __str__(self) -> str:
        return f"Student(id={self.student_id!r}, programme={self.programme!r})"

    class Config:
        json_schema_extra = {
            "example": {
                "student_id": "STU0001",
                "full_name": "Ama Mensah",
                "programme": "Computer Science",
                "level": 200,
                "gpa": 3.45,
                "email": "ama.mensah@example.com",
                "phone_number": "0244000001",
                "date_added": "2024-09-02",
                "status": "Active"
            }
        }
