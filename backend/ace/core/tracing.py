"""
LangSmith tracing for the schema-inference LLM calls.

`setup_tracing()` exports the LangSmith settings to the environment the SDK
reads; `traceable_step` routes a coroutine through ``langsmith.traceable``
only while tracing is switched on, so local runs without a key behave as if
the decorator were absent.

    @traceable_step(name="infer_template_schema", run_type="llm")
    async def complete(prompt, model):
        ...
"""

from __future__ import annotations

import functools
import os
from typing import Any, Awaitable, Callable

from langsmith import traceable

from ace.core.config import settings
from ace.core.logging import get_logger

logger = get_logger(__name__)

_tracing_enabled = False


def setup_tracing() -> bool:
    """Enable tracing when LANGSMITH_TRACING and an API key are both set."""
    global _tracing_enabled

    _tracing_enabled = bool(settings.LANGSMITH_TRACING and settings.LANGSMITH_API_KEY)
    if not _tracing_enabled:
        logger.info("LangSmith tracing disabled")
        return False

    os.environ.update({
        "LANGSMITH_API_KEY": settings.LANGSMITH_API_KEY,
        "LANGSMITH_ENDPOINT": settings.LANGSMITH_ENDPOINT,
        "LANGSMITH_PROJECT": settings.LANGSMITH_PROJECT,
        "LANGSMITH_TRACING": "true",
    })
    logger.info("LangSmith tracing enabled", project=settings.LANGSMITH_PROJECT)
    return True


def traceable_step(
    name: str,
    run_type: str = "chain",
    metadata: dict[str, Any] | None = None,
    tags: list[str] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """
    Trace an async function as one LangSmith run.

    Args:
        name: Run name shown in LangSmith.
        run_type: "chain", "llm", "tool" or "retriever".
        metadata: Static metadata attached to every run.
        tags: Tags for filtering runs.
    """
    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        traced = traceable(
            name=name,
            run_type=run_type,
            metadata=metadata or {},
            tags=tags or [],
        )(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            target = traced if _tracing_enabled else func
            return await target(*args, **kwargs)
        return wrapper
    return decorator
