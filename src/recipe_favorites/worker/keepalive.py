"""Keepalive job for free-tier hosting.

Hosting platforms idle a web service after ~15 minutes without traffic.
This job pings the service's own health endpoint on a cron-style
`*/14` minute schedule so that never happens.

Architecture:
- next_fire_time: pure schedule computation (cron minute step, fixed tz)
- KeepaliveJob: owns one daemon thread; start()/stop() lifecycle
- KeepaliveJob.run_once: a single firing, Idle -> Requesting -> outcome

Firings run one after another on the job's thread, so two pings can
never be in flight at once. Every failure is logged and dropped; nothing
is retried and nothing leaves the job.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from enum import Enum
from zoneinfo import ZoneInfo

import requests

logger = logging.getLogger(__name__)

PING_EVERY_MINUTES = 14
PING_TIMEOUT_SECONDS = 10.0
SCHEDULE_TIMEZONE = "UTC"


class PingOutcome(str, Enum):
    """Result of one firing."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


def next_fire_time(now: datetime, every_minutes: int = PING_EVERY_MINUTES) -> datetime:
    """Return the next `*/every_minutes` minute boundary strictly after `now`.

    Matches cron's minute step: with every_minutes=14 the job fires at
    :00, :14, :28, :42 and :56 of every hour, so the gap across the top
    of the hour is shorter than the others.

    Args:
        now: Current time, in the schedule's timezone.
        every_minutes: Minute step, 1-59.

    Returns:
        Datetime of the next firing, in the same timezone as `now`.
    """
    if not 1 <= every_minutes <= 59:
        raise ValueError(f"every_minutes must be in 1..59, got {every_minutes}")

    base = now.replace(second=0, microsecond=0)
    minute = (base.minute // every_minutes + 1) * every_minutes
    if minute >= 60:
        return base.replace(minute=0) + timedelta(hours=1)
    return base.replace(minute=minute)


class KeepaliveJob:
    """Periodically GETs a health URL.

    Only one instance should exist per process. It is created and owned
    by the application lifespan.
    """

    def __init__(
        self,
        url: str,
        every_minutes: int = PING_EVERY_MINUTES,
        timeout: float = PING_TIMEOUT_SECONDS,
        tz: str = SCHEDULE_TIMEZONE,
        session: requests.Session | None = None,
    ):
        """Initialize job.

        Args:
            url: Health endpoint to ping.
            every_minutes: Cron minute step.
            timeout: Per-request timeout in seconds.
            tz: IANA timezone the schedule is evaluated in.
            session: HTTP session; a new one is created if omitted.
        """
        self.url = url
        self.every_minutes = every_minutes
        self.timeout = timeout
        self.tz = ZoneInfo(tz)
        self._session = session or requests.Session()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start firing on schedule. No-op if already running."""
        if self.running:
            return
        # Each run owns its event, so a thread left over from an earlier run
        # stays stopped
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="keepalive", daemon=True
        )
        self._thread.start()
        logger.info(
            f"Keepalive job started: GET {self.url} every {self.every_minutes} min ({self.tz.key})"
        )

    def stop(self) -> None:
        """Cancel the timer. No further firings happen after this returns.

        A ping already in flight is not awaited; its thread is a daemon.
        """
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread = None
        logger.info("Keepalive job stopped gracefully")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            now = datetime.now(self.tz)
            delay = (next_fire_time(now, self.every_minutes) - now).total_seconds()
            if stop_event.wait(delay):
                break
            try:
                self.run_once()
            except Exception:
                # Keep the schedule alive whatever a single firing does
                logger.exception("Health ping crashed")

    def run_once(self) -> PingOutcome:
        """Fire one health ping and log the outcome."""
        logger.info(f"[{datetime.now(timezone.utc).isoformat()}] Initiating health ping...")

        try:
            response = self._session.get(self.url, timeout=self.timeout)
        except requests.Timeout:
            logger.error("Health ping request timed out")
            return PingOutcome.TIMED_OUT
        except requests.RequestException as e:
            logger.error(f"Health ping request failed: {e}")
            return PingOutcome.FAILED

        body = response.text.strip()
        if 200 <= response.status_code < 300:
            logger.info(f"Health ping successful. Response: {body}")
            return PingOutcome.SUCCEEDED

        logger.error(f"Health ping failed with status {response.status_code}. Response: {body}")
        return PingOutcome.FAILED
