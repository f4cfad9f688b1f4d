from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config

from src.setup.aws_config import AwsSettings

logger = logging.getLogger(__name__)


class AwsClients:
    """Builds boto3 clients sharing one session, region and endpoint override."""

    def __init__(
        self,
        settings: AwsSettings,
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
    ) -> None:
        self._session = boto3.session.Session(
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
        )
        self._endpoint_url = settings.endpoint_url
        self._config = Config(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            # Local emulators serve buckets by path rather than virtual host.
            s3={"addressing_mode": "path"},
        )

    def client(self, service: str) -> Any:
        logger.debug(
            "Creating AWS %s client (endpoint=%s)",
            service,
            self._endpoint_url,
            extra={"service": service, "endpoint": self._endpoint_url},
        )
        return self._session.client(
            service,
            endpoint_url=self._endpoint_url,
            config=self._config,
        )
