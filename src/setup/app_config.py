import inject

from src.app.domain.repositories import (
    BlobStoreRepository,
    EventFanoutRepository,
    TaskTableRepository,
)
from src.app.infrastructure.aws import AwsClients, DynamoTaskTable, S3BlobStore, SnsSqsFanout
from src.setup.aws_config import AwsSettings, get_aws_settings


def _bindings(settings: AwsSettings):
    clients = AwsClients(settings)

    def _config(binder: inject.Binder) -> None:
        binder.bind(TaskTableRepository, DynamoTaskTable(clients.client("dynamodb")))
        binder.bind(BlobStoreRepository, S3BlobStore(clients.client("s3")))
        binder.bind(
            EventFanoutRepository,
            SnsSqsFanout(clients.client("sns"), clients.client("sqs")),
        )

    return _config


def configure_di(settings: AwsSettings | None = None) -> None:
    """Bind the AWS adapters into the DI container once per process."""
    if inject.is_configured():
        return
    inject.configure(_bindings(settings or get_aws_settings()))
