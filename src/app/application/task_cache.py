from __future__ import annotations

from src.app.domain.models.task import TaskRecord


class TaskCache:
    """Process-owned map of task id to the most recently written record.

    Shared by every request handled by the process and never persisted.
    Mutations happen between awaits only, so the last write to land wins.
    """

    def __init__(self) -> None:
        self._records: dict[str, TaskRecord] = {}

    def get(self, task_id: str) -> TaskRecord | None:
        return self._records.get(task_id)

    def put(self, record: TaskRecord) -> None:
        self._records[record.id] = record

    def setdefault(self, record: TaskRecord) -> TaskRecord:
        return self._records.setdefault(record.id, record)

    def pop(self, task_id: str) -> TaskRecord | None:
        return self._records.pop(task_id, None)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._records

    def __len__(self) -> int:
        return len(self._records)
