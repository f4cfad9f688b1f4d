from src.app.infrastructure.aws.client import AwsClients
from src.app.infrastructure.aws.dynamodb import DynamoTaskTable
from src.app.infrastructure.aws.messaging import SnsSqsFanout
from src.app.infrastructure.aws.s3 import S3BlobStore

__all__ = [
    "AwsClients",
    "DynamoTaskTable",
    "S3BlobStore",
    "SnsSqsFanout",
]
