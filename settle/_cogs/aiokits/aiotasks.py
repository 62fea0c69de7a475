"""
Helpers for orchestrating the tasks of the concurrent waiting sessions.

These utilities only support tasks, not more generic futures, coroutines,
or other awaitables: the sessions are not only awaited, but also cancelled.
"""
import asyncio
from typing import TYPE_CHECKING, Any, Collection, Set, Tuple

from settle._cogs.helpers import typedefs

# A workaround for a difference in tasks at runtime and type-checking time.
# Otherwise, at runtime: TypeError: 'type' object is not subscriptable.
if TYPE_CHECKING:
    Task = asyncio.Task[Any]
else:
    Task = asyncio.Task


async def wait(
        tasks: Collection[Task],
        *,
        return_when: Any = asyncio.ALL_COMPLETED,
) -> Tuple[Set[Task], Set[Task]]:
    """
    A safer version of :func:`asyncio.wait` -- does not fail on an empty list.
    """
    if not tasks:
        return set(), set()
    done, pending = await asyncio.wait(tasks, return_when=return_when)
    return done, pending


async def stop(
        tasks: Collection[Task],
        *,
        title: str,
        logger: typedefs.Logger,
) -> None:
    """
    Cancel the sessions and wait until they are all finished.

    The sessions react to the cancellation at their next suspension point:
    either in the sleep between the probes, or in the probe's own I/O.
    If the stopping itself is cancelled, the sessions remain cancelled,
    but are not awaited anymore.
    """
    unfinished = [task for task in tasks if not task.done()]
    if not unfinished:
        return
    for task in unfinished:
        task.cancel()
    await wait(unfinished)
    logger.debug(f"{title.capitalize()}: {len(unfinished)} unfinished session(s) are cancelled.")
