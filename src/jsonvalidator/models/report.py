"""Pydantic models for serialized validation failures."""

from pydantic import BaseModel, ConfigDict, Field


class ViolationReport(BaseModel):
    """A validation failure tree in the shape handed to integrators."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    pointer: str = Field(..., pattern=r"^#")
    message: str
    causing_exceptions: list["ViolationReport"] = Field(
        default_factory=list, alias="causingExceptions"
    )

    def leaves(self) -> list["ViolationReport"]:
        """Reports without causes, depth first."""
        if not self.causing_exceptions:
            return [self]
        result: list[ViolationReport] = []
        for cause in self.causing_exceptions:
            result.extend(cause.leaves())
        return result


ViolationReport.model_rebuild()
