from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from src.app.domain.exceptions import UpstreamFailureError

T = TypeVar("T")


async def call(operation: str, func: Callable[..., T], /, **kwargs: Any) -> T:
    """Run a blocking boto3 call off the event loop, translating its failures."""
    try:
        return await asyncio.to_thread(func, **kwargs)
    except (BotoCoreError, ClientError) as exc:
        raise UpstreamFailureError(operation, exc) from exc
