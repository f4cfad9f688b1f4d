class TaskNotFoundError(Exception):
    """Raised when a task identifier does not exist in the task store."""
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id '{task_id}' was not found.")
        self.task_id = task_id


class UploadValidationError(Exception):
    """Raised when an image upload carries no usable payload."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamFailureError(Exception):
    """Raised when a call to the table, blob or messaging service fails."""

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class PartialFailureError(Exception):
    """Raised when removing a task's image fails during task deletion."""

    def __init__(self, blob_key: str, cause: Exception) -> None:
        super().__init__(f"Failed to delete image '{blob_key}': {cause}")
        self.blob_key = blob_key
        self.cause = cause


class ProvisioningError(Exception):
    """Raised when a provisioning step fails; later steps are not attempted."""

    def __init__(self, step: str, cause: Exception) -> None:
        super().__init__(f"Provisioning step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause
