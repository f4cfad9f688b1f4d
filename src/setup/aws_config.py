from pydantic import ConfigDict
from pydantic_settings import BaseSettings

TOPIC_NAME = "task-events"
QUEUE_NAME = "task-queue"


class AwsSettings(BaseSettings):
    """Credentials, endpoint and resource names for the AWS-compatible backend."""
    AWS_ACCESS_KEY_ID: str = "test"
    AWS_SECRET_ACCESS_KEY: str = "test"
    AWS_REGION: str = "us-east-1"
    # Empty value talks to the real AWS endpoints.
    AWS_ENDPOINT: str | None = "http://localhost:4566"
    S3_BUCKET: str = "task-images"
    DYNAMO_TABLE: str = "Tasks"
    SNS_TOPIC_ARN: str = "arn:aws:sns:us-east-1:000000000000:task-events"

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def endpoint_url(self) -> str | None:
        return self.AWS_ENDPOINT or None


def get_aws_settings() -> AwsSettings:
    """Return a fresh AWS settings instance."""
    return AwsSettings()
