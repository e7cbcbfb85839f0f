"""
ValidationOutcome model collecting every rule violation for one record (ephemeral).
"""

from pydantic import BaseModel, Field


class ValidationOutcome(BaseModel):
    """
    Ordered list of human-readable violations; empty means valid.

    Field checks append to an outcome rather than replacing it, so the
    same accumulator can be shared across several checks.
    """

    errors: list[str] = Field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_message(self) -> str:
        """All violations joined by newlines, one per line."""
        return "\n".join(self.errors)
