import logging
import threading
import time
from collections.abc import Callable, Collection
from typing import Any, Optional

from compose_monitor.engine import ContainerEngine
from compose_monitor.errors import EngineQueryError
from compose_monitor.model import normalize_name
from compose_monitor.snapshot import ContainerSnapshot, ObservationLog

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_RETRY_DELAY = 0.5


def matches(container: dict[str, Any], expected: Collection[str]) -> bool:
    return any(normalize_name(n) in expected for n in container["Names"])


def query_engine(
    engine: ContainerEngine,
    retries: int = 0,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> list[dict[str, Any]]:
    """
    List containers, retrying up to `retries` extra times.
    With retries=0 the first failure is final.
    """
    attempt = 0
    while True:
        try:
            return engine.list_containers()
        except EngineQueryError as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning(
                f"Engine query failed ({e.message}), retry {attempt}/{retries}"
            )
            sleep(retry_delay)


def sample(
    engine: ContainerEngine,
    expected: Collection[str],
    log: ObservationLog,
    retries: int = 0,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run a single tick: append one snapshot per matching container, in the
    order the engine returned them. Returns how many were appended.
    """
    containers = query_engine(
        engine, retries=retries, retry_delay=retry_delay, sleep=sleep
    )

    appended = 0
    for container in containers:
        if matches(container, expected):
            log.append(ContainerSnapshot.from_engine(container))
            appended += 1
    return appended


def monitor_containers(
    engine: ContainerEngine,
    expected: Collection[str],
    ticks: int,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    retries: int = 0,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    stop: Optional[threading.Event] = None,
) -> ObservationLog:
    """
    Sample the engine `ticks` times and collect every matching container.

    Each tick queries the engine once and then waits `interval`, the last
    tick included, so N ticks mean N queries and N waits.

    An EngineQueryError aborts the remaining ticks and propagates; the
    entries gathered so far are dropped with the log.

    If `stop` is given it replaces `sleep` for the inter-tick wait and is
    checked before every tick; once set, monitoring ends and the log
    collected so far is returned.
    """
    if ticks < 0:
        raise ValueError(f"tick count must be >= 0, got {ticks}")

    logger.info(f"Monitoring the following containers: {sorted(expected)}")
    log = ObservationLog()

    for tick in range(1, ticks + 1):
        if stop is not None and stop.is_set():
            logger.info(f"Monitoring stopped before tick {tick}/{ticks}")
            break

        appended = sample(
            engine,
            expected,
            log,
            retries=retries,
            retry_delay=retry_delay,
            sleep=sleep,
        )
        logger.debug(f"Tick {tick}/{ticks}: {appended} matching containers")

        if stop is not None:
            stop.wait(interval)
        else:
            sleep(interval)

    return log


def wait_until_ready(
    engine: ContainerEngine,
    expected: Collection[str],
    timeout: float,
    interval: float = DEFAULT_INTERVAL,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    retries: int = 0,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> bool:
    """
    Poll until every expected name is live or `timeout` seconds pass.

    Returns False on timeout; that is only a warning, monitoring still runs.
    Each poll retries failed engine queries the same way a tick does.
    """
    if not expected:
        return True

    deadline = clock() + timeout
    while True:
        live = {
            normalize_name(n)
            for container in query_engine(
                engine, retries=retries, retry_delay=retry_delay, sleep=sleep
            )
            for n in container["Names"]
        }
        missing = set(expected) - live
        if not missing:
            logger.info("All expected containers are up")
            return True

        if clock() >= deadline:
            logger.warning(
                f"Readiness timeout after {timeout}s, still missing: {sorted(missing)}"
            )
            return False

        logger.debug(f"Waiting for containers: {sorted(missing)}")
        sleep(interval)
