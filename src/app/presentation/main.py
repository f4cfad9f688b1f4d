from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.app.application.provisioner import ResourceProvisioner
from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di
from src.setup.logging_config import configure_logging

settings = get_api_settings()
configure_logging(settings.LOG_LEVEL)
configure_di()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.PROVISION_ON_STARTUP:
        await ResourceProvisioner().ensure()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Task API with image attachments",
    lifespan=lifespan,
)

from src.app.presentation.routes import router as api_router  # noqa: E402

app.include_router(api_router, prefix="")
