from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskRecord(BaseModel):
    """A task as stored in the cache and the task table.

    Only the reserved fields are declared; any other caller-defined field is
    kept as-is through ``extra="allow"``.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Unique task identifier.")
    # Timestamps are stored as given; generated ones are ISO-8601 strings.
    createdAt: Any = Field(default=None, description="Set once at creation.")
    updatedAt: Any = Field(default=None, description="Set on every update.")
    imageKey: str | None = Field(
        default=None, description="Key of the attached image blob, if any."
    )

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "TaskRecord":
        return cls.model_validate(item)

    def to_item(self) -> dict[str, Any]:
        """Return the record as a plain mapping, omitting reserved fields never set."""
        return self.model_dump(exclude_unset=True)


class TaskDeletion(BaseModel):
    success: bool = Field(default=True)
    id: str = Field(description="Identifier of the deleted task.")
