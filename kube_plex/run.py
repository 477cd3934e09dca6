import asyncio
import signal
from contextlib import contextmanager
from enum import StrEnum

import structlog

from .errors import CleanupError, JobFailedError, PollError, SubmissionError
from .job import JobHandle, JobSpec, Phase
from .kube_util import PodClient

CREATE_TIMEOUT = 60.0
POLL_TIMEOUT = 60.0
DELETE_TIMEOUT = 300.0
POLL_INTERVAL = 1.0

# Our deadlines run this far past the client request timeout so the client gives up first
CALL_GRACE = 5.0

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

logger = structlog.get_logger()


class Outcome(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@contextmanager
def stop_on_signals(stop: asyncio.Event):
    loop = asyncio.get_running_loop()

    def request_stop(sig: signal.Signals) -> None:
        logger.info("exit_requested", signal=sig.name)
        stop.set()

    for sig in STOP_SIGNALS:
        loop.add_signal_handler(sig, request_stop, sig)

    try:
        yield
    finally:
        for sig in STOP_SIGNALS:
            loop.remove_signal_handler(sig)


async def bounded(fn, *args, timeout: float):
    return await asyncio.wait_for(asyncio.to_thread(fn, *args, timeout), timeout + CALL_GRACE)


async def submit(pods: PodClient, spec: JobSpec) -> JobHandle:
    try:
        return await bounded(pods.create, spec, timeout=CREATE_TIMEOUT)
    except TimeoutError as e:
        raise SubmissionError(spec.namespace, "timed out") from e


async def fetch_phase(pods: PodClient, handle: JobHandle) -> Phase:
    try:
        return await bounded(pods.get_phase, handle, timeout=POLL_TIMEOUT)
    except TimeoutError as e:
        raise PollError(handle.name, "timed out") from e


async def tick(stop: asyncio.Event, interval: float) -> bool:
    """Sleep for one poll interval. Returns False if a stop came in meanwhile."""
    try:
        await asyncio.wait_for(stop.wait(), interval)
    except TimeoutError:
        return True
    return False


async def wait_for_completion(
    pods: PodClient, handle: JobHandle, stop: asyncio.Event, interval: float
) -> Phase | None:
    # None means a stop came in first. Failures are not retried.
    while True:
        phase = await fetch_phase(pods, handle)

        if phase is Phase.SUCCEEDED:
            return phase
        if phase is Phase.FAILED:
            raise JobFailedError(handle.name)
        if phase is Phase.UNKNOWN:
            logger.warning("pod_phase_unknown", pod=str(handle))

        if not await tick(stop, interval):
            return None


async def supervise(
    pods: PodClient, handle: JobHandle, stop: asyncio.Event, interval: float
) -> Outcome:
    poll = asyncio.create_task(wait_for_completion(pods, handle, stop, interval))
    stopped = asyncio.create_task(stop.wait())

    try:
        done, _ = await asyncio.wait({poll, stopped}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        # Whichever lost the race is abandoned, including a fetch in flight
        poll.cancel()
        stopped.cancel()
        await asyncio.gather(poll, stopped, return_exceptions=True)

    if poll not in done:
        return Outcome.CANCELLED

    try:
        phase = poll.result()
    except (JobFailedError, PollError) as e:
        logger.error("waiting_for_pod_failed", pod=str(handle), error=str(e))
        return Outcome.FAILED

    if phase is None:
        return Outcome.CANCELLED

    logger.info("pod_succeeded", pod=str(handle))
    return Outcome.SUCCEEDED


async def cleanup(pods: PodClient, handle: JobHandle) -> None:
    logger.info("cleaning_up_pod", pod=str(handle))

    try:
        await bounded(pods.delete, handle, timeout=DELETE_TIMEOUT)
    except TimeoutError as e:
        raise CleanupError(handle.namespace, handle.name, "timed out") from e

    logger.info("pod_deleted", pod=str(handle))


async def run_job(
    pods: PodClient,
    spec: JobSpec,
    stop: asyncio.Event | None = None,
    poll_interval: float = POLL_INTERVAL,
) -> Outcome:
    handle = await submit(pods, spec)
    logger.info("pod_created", pod=str(handle), image=spec.image)

    if stop is None:
        stop = asyncio.Event()

    with stop_on_signals(stop):
        try:
            outcome = await supervise(pods, handle, stop, poll_interval)
        finally:
            await cleanup(pods, handle)

    return outcome
