"""
Concurrency Infrastructure.

Shared thread pool for blocking I/O (the boto3 blob store client is
synchronous). The pool is created lazily on first use and shut down with
the application.

Usage:
    from cloudnotes.backend.core.concurrency import run_blocking

    url = await run_blocking(client.generate_presigned_url, "get_object", Params=params)
"""

import asyncio
import contextvars
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

from cloudnotes.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_io_pool: ThreadPoolExecutor | None = None


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Keeps request_id and owner_id bound in structlog for logs emitted from
    worker threads.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool, sized from concurrency.yaml."""
    global _io_pool
    if _io_pool is None:
        from cloudnotes.backend.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def run_blocking(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable on the shared I/O pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_io_pool(), functools.partial(fn, *args, **kwargs))


async def shutdown_pools() -> None:
    """Shut down the pool. Called during application shutdown.

    Pool shutdown is blocking, so it runs in a thread to keep the
    event loop responsive.
    """
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None
