from src.app.domain.models.image import ImageUpload
from src.app.domain.models.resources import ProvisionedResources
from src.app.domain.models.task import TaskDeletion, TaskRecord

__all__ = [
    "TaskRecord",
    "TaskDeletion",
    "ImageUpload",
    "ProvisionedResources",
]
