"""
Sleeping that can be interrupted by an event, measured by the loop's clock.

All the time measurements are done by the event loop's clock, not by the
wall-clock: this keeps the timeouts immune to system time adjustments,
and makes them controllable in tests (e.g. with the fake time of ``looptime``).
"""
import asyncio
from typing import Optional


async def sleep(
        delay: float,
        wakeup: Optional[asyncio.Event] = None,
) -> Optional[float]:
    """
    Measure the sleep time: either until the timeout, or until the event is set.

    Returns the number of seconds left to sleep, or ``None`` if the sleep was
    not interrupted and reached its specified delay (an equivalent of ``0``).
    In theory, the result can be ``0`` if the sleep was interrupted precisely
    the last moment before timing out; this is unlikely to happen though.

    Zero and negative delays do not sleep at all.
    """
    if delay <= 0:
        return None

    awakening_event = asyncio.Event() if wakeup is None else wakeup
    loop = asyncio.get_running_loop()
    try:
        start_time = loop.time()
        await asyncio.wait_for(awakening_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return None  # interruptable sleep is over: uninterrupted.
    else:
        end_time = loop.time()
        duration = end_time - start_time
        return max(0, delay - duration)
