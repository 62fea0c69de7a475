"""
Waiting for the remote resources to reach the desired states.

One waiting session drives one probe on a cadence: it probes immediately,
then sleeps, then probes again, and so on -- until the resource reaches one of
the target states, or fails, or the deadline comes, or the session is stopped.

The probes within one session are strictly sequential: the next probe starts
only when the previous one is over, so every next reading is at least as fresh
as the previous one. The sleeps between the probes are the only suspension
points of the session itself (except the probes' own I/O).

The deadline is measured from the start of the session, not from the last
probe: slow probes consume the time budget the same way as the sleeps do.
A probe running when the deadline comes is cancelled.

All the failures of the session carry the last known snapshot and state label,
so that the callers could explain the failure to the users in the messages.
"""
import asyncio
import random
from typing import Any, Coroutine, Generic, Iterator, List, Optional, Sequence, TypeVar

from settle._cogs.aiokits import aiotasks, aiotime
from settle._cogs.helpers import typedefs
from settle._cogs.structs import states

_SnapshotT = TypeVar('_SnapshotT')


class WaitError(Exception, Generic[_SnapshotT]):
    """ A base class for all the failures of the waiting sessions. """

    def __init__(
            self,
            message: str,
            *,
            snapshot: Optional[_SnapshotT] = None,
            label: Optional[states.StateLabel] = None,
    ) -> None:
        super().__init__(message)
        self.snapshot = snapshot
        self.label = label


class WaitTransportError(WaitError[_SnapshotT]):
    """ The probe has failed to fetch the resource. The original error is the cause. """


class UnexpectedStateError(WaitError[_SnapshotT]):
    """ The resource is in a state that is neither pending nor targeted. """


class WaitTimeoutError(WaitError[_SnapshotT], TimeoutError):
    """ The resource is still pending when the time is over. """


class WaitCancelledError(WaitError[_SnapshotT]):
    """ The session is stopped by the caller before the resource has settled. """


def iter_delays(
        spec: states.WaitSpec,
        *,
        rng: Optional[random.Random] = None,
) -> Iterator[float]:
    """
    Generate the intervals between the probes: fixed, or growing, or jittered.
    """
    rng = rng if rng is not None else random.Random()
    delay = spec.delay
    while True:
        capped = delay if spec.max_delay is None else min(delay, spec.max_delay)
        jittered = capped * (1.0 + spec.jitter * rng.uniform(-1.0, 1.0)) if spec.jitter else capped
        yield max(0.0, jittered)
        delay *= spec.backoff


async def wait_for_state(
        probe: states.Probe[_SnapshotT],
        spec: states.WaitSpec,
        *,
        logger: typedefs.Logger,
        stopper: Optional[asyncio.Event] = None,
        rng: Optional[random.Random] = None,
) -> Optional[_SnapshotT]:
    """
    Probe the resource until it settles in one of the target states.

    Returns the snapshot of the last reading, i.e. the one with a target state.
    For the sessions succeeding by the resource's absence, it is ``None``.

    Raises one of the :class:`WaitError` descendants on failures. The asyncio
    cancellation of the session's task is propagated as usually (as it is).
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + spec.timeout
    delays = iter_delays(spec, rng=rng)
    target_occurrences = 0
    not_found_occurrences = 0
    snapshot: Optional[_SnapshotT] = None
    label: Optional[states.StateLabel] = None
    while True:

        # The stopper is checked before the probes: no new requests after the stop.
        if stopper is not None and stopper.is_set():
            raise WaitCancelledError(f"Stopped waiting for {spec.what}: it is {label!r}.",
                                     snapshot=snapshot, label=label)

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise _timed_out(spec, snapshot=snapshot, label=label)

        try:
            reading = await asyncio.wait_for(_read(probe), timeout=remaining)
        except asyncio.TimeoutError:
            raise _timed_out(spec, snapshot=snapshot, label=label) from None

        if reading.error is not None:
            raise WaitTransportError(f"Failed to probe {spec.what}: {reading.error}",
                                     snapshot=snapshot, label=label) from reading.error

        # Replaced wholesale: a missing snapshot means the resource is gone, not unchanged.
        snapshot, label = reading.snapshot, reading.label

        if spec.is_success(label):
            not_found_occurrences = 0
            target_occurrences += 1
            if target_occurrences >= spec.continuous_target_occurrence:
                logger.info(f"{spec.what.capitalize()} has settled as {label!r}.")
                return snapshot
        elif spec.is_pending(label):
            not_found_occurrences = target_occurrences = 0
        elif label == states.NOT_FOUND and not_found_occurrences < spec.not_found_checks:
            target_occurrences = 0
            not_found_occurrences += 1
        else:
            raise UnexpectedStateError(f"Unexpected state of {spec.what}: {label!r}; "
                                       f"expected {sorted(spec.target)!r} "
                                       f"or pending {sorted(spec.pending)!r}.",
                                       snapshot=snapshot, label=label)

        # If the next probe does not fit into the time budget, only wait for the deadline.
        # There is no need to wake up before the deadline only to see that it has come.
        delay = next(delays)
        remaining = deadline - loop.time()
        if delay < remaining:
            logger.debug(f"{spec.what.capitalize()} is {label!r}; next probe in {delay:.3g}s.")
            unslept = await aiotime.sleep(delay, wakeup=stopper)
        else:
            logger.debug(f"{spec.what.capitalize()} is {label!r}; no more probes fit the timeout.")
            unslept = await aiotime.sleep(remaining, wakeup=stopper)
            if unslept is None and (stopper is None or not stopper.is_set()):
                raise _timed_out(spec, snapshot=snapshot, label=label)
        if unslept is not None:
            logger.debug(f"Waiting for {spec.what} is interrupted with {unslept:.3g}s left.")


async def _read(probe: states.Probe[_SnapshotT]) -> states.Reading[_SnapshotT]:
    """
    Turn the failures of custom probes into failed readings, as the stock probes do.

    Only the deadline of the session can time out the probe from the outside:
    the probe's own timeouts (e.g. of the sockets) are its errors as any other.
    """
    try:
        return await probe()
    except Exception as e:
        return states.Reading(None, states.UNKNOWN, e)


def _timed_out(
        spec: states.WaitSpec,
        *,
        snapshot: Optional[_SnapshotT],
        label: Optional[states.StateLabel],
) -> WaitTimeoutError[_SnapshotT]:
    return WaitTimeoutError(f"Timed out waiting for {spec.what} after {spec.timeout}s: "
                            f"it is still {label!r}; expected {sorted(spec.target)!r}.",
                            snapshot=snapshot, label=label)


async def wait_for_all(
        coros: Sequence[Coroutine[Any, Any, _SnapshotT]],
        *,
        title: str = "waiting",
        cancel_on_failure: bool = False,
        logger: typedefs.Logger,
) -> List[_SnapshotT]:
    """
    Run several independent waiting sessions concurrently, and join them all.

    The confirmation is all-or-nothing: the results are returned (in the order
    of the given coroutines) only if all of the sessions have succeeded.
    Otherwise, the first failure (in the order of happening) is re-raised
    after all the sessions are finished -- or cancelled, if requested so.
    """
    tasks = [asyncio.create_task(coro) for coro in coros]
    try:
        done, pending = await aiotasks.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        failed = [task for task in done if not task.cancelled() and task.exception() is not None]
        if failed and cancel_on_failure:
            await aiotasks.stop(pending, title=title, logger=logger)
        else:
            await aiotasks.wait(pending)
    except asyncio.CancelledError:
        await aiotasks.stop(tasks, title=title, logger=logger)
        raise

    # Log all of the failures, but escalate the first one. The order of the `done` set
    # is not guaranteed, so the first failure is the first found in the first `done` batch.
    first_failure: Optional[BaseException] = next((t.exception() for t in failed), None)
    for task in tasks:
        if task.cancelled():
            continue
        exc = task.exception()
        if exc is not None:
            logger.error(f"{title.capitalize()} has failed: {exc}")
            first_failure = first_failure if first_failure is not None else exc
    if first_failure is not None:
        raise first_failure
    return [task.result() for task in tasks]
