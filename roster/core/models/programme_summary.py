"""
ProgrammeSummary model: one row of the per-programme report.
"""

from pydantic import BaseModel, Field


class ProgrammeSummary(BaseModel):
    """
    Attributes:
        programme: Programme name
        total: Number of students in the programme
        average_gpa: Mean GPA formatted with two decimal places
    """

    programme: str
    total: int = Field(..., ge=0)
    average_gpa: str
