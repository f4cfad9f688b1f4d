from pydantic import BaseModel, ConfigDict, Field


class ImageUpload(BaseModel):
    """Where an uploaded image blob was stored.

    Serialized with the ``id``/``key``/``bucket`` keys clients already consume.
    """

    model_config = ConfigDict(populate_by_name=True)

    generated_id: str = Field(
        serialization_alias="id", description="Fresh identifier minted for this upload."
    )
    blob_key: str = Field(serialization_alias="key", description="Object key, '<id>.jpg'.")
    bucket: str = Field(description="Bucket holding the blob.")
