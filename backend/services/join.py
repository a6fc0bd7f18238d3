"""
Fan-out / fan-in over a fixed set of named awaitables.

join_all() starts every awaitable at once and only hands back results
when all of them succeeded. The first failure cancels the rest.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional

from services.errors import GatewayError, SynthesisCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Caller-held switch that aborts an in-flight synthesis."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self):
        await self._event.wait()


def _discard(awaitables):
    for aw in awaitables:
        if asyncio.iscoroutine(aw):
            aw.close()


async def join_all(tasks: Dict[str, Awaitable], token: Optional[CancellationToken] = None) -> Dict[str, Any]:
    """
    Run *tasks* concurrently and return ``{name: result}``.

    Raises the failing task's GatewayError (other exceptions are wrapped
    in one, tagged with the task name) or SynthesisCancelled if *token*
    fires first. Nothing is returned unless every task completed.
    """
    if token is not None and token.cancelled:
        _discard(tasks.values())
        raise SynthesisCancelled("Synthesis was cancelled before dispatch")

    running = {asyncio.ensure_future(aw): name for name, aw in tasks.items()}
    pending = set(running)
    watcher = asyncio.ensure_future(token.wait()) if token is not None else None

    try:
        while pending:
            waiting = pending | {watcher} if watcher is not None else pending
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

            if watcher is not None and watcher in done:
                raise SynthesisCancelled("Synthesis was cancelled")

            for task in done:
                pending.discard(task)
                name = running[task]
                if task.cancelled():
                    raise GatewayError(f"{name} was cancelled", name)
                exc = task.exception()
                if isinstance(exc, GatewayError):
                    raise exc
                if exc is not None:
                    raise GatewayError(f"{name} failed: {exc}", name) from exc

        return {name: task.result() for task, name in running.items()}

    finally:
        leftovers = list(pending)
        if watcher is not None:
            leftovers.append(watcher)
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)
        # mark sibling failures as retrieved
        for task in running:
            if task.done() and not task.cancelled():
                task.exception()
        if pending:
            logger.debug(f"Cancelled {len(pending)} outstanding generation task(s)")
