import asyncio
import logging
import sys

from src.app.application.provisioner import ResourceProvisioner
from src.app.domain.exceptions import ProvisioningError
from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di
from src.setup.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def run(provisioner: ResourceProvisioner | None = None) -> int:
    """Provision the durable resources once and return the process exit code."""
    provisioner = provisioner or ResourceProvisioner()
    try:
        resources = await provisioner.ensure()
    except ProvisioningError as exc:
        logger.error(
            "Bootstrap error in step '%s'",
            exc.step,
            extra={"step": exc.step},
            exc_info=exc.cause,
        )
        return 1
    logger.info(
        "Bootstrap completed: bucket=%s table=%s topic=%s queue=%s",
        resources.bucket,
        resources.table,
        resources.topic_arn,
        resources.queue_url,
        extra=resources.model_dump(),
    )
    return 0


def main() -> None:
    configure_logging(get_api_settings().LOG_LEVEL)
    configure_di()
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
