"""
ImportOutcome model returned by a CSV import run.
"""

from pydantic import BaseModel, Field

from .student import Student


class ImportOutcome(BaseModel):
    """
    Result of importing a CSV file.

    Attributes:
        students: Records that parsed, were unique and passed validation,
                  in input order
        errors: One diagnostic per rejected line, in input line order
        save_errors: Failures raised while persisting accepted records
                     (only filled when the import also saves)
    """

    students: list[Student] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    save_errors: list[str] = Field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.students)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors or self.save_errors)
