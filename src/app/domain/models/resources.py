from pydantic import BaseModel, Field


class ProvisionedResources(BaseModel):
    """Durable dependencies established by a provisioning run."""

    bucket: str = Field(description="Image bucket name.")
    bucket_created: bool = Field(description="Whether this run created the bucket.")
    table: str = Field(description="Task table name.")
    table_created: bool = Field(description="Whether this run created the table.")
    topic_arn: str = Field(description="Task event topic ARN.")
    queue_url: str = Field(description="Task event queue URL.")
    queue_arn: str = Field(description="Task event queue ARN.")
    subscription_arn: str | None = Field(
        default=None, description="Queue-to-topic subscription ARN."
    )
