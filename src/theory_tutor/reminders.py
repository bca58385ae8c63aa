"""Weekly reminder schedule and the timer that fires it."""
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from theory_tutor.models import Settings

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Theory Mock Test"
FALLBACK_DELAY_MS = 24 * 60 * 60 * 1000
SCAN_DAYS = 8

IDLE = "idle"
ARMED = "armed"

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_reminder_time(value: str) -> tuple[int, int]:
    """Parse "HH:MM" into (hour, minute)."""
    try:
        hh, mm = value.split(":")
        hour, minute = int(hh), int(mm)
    except (AttributeError, ValueError):
        raise ValueError(f"Reminder time must be HH:MM, got {value!r}") from None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Reminder time out of range: {value!r}")
    return hour, minute


def weekday_number(d: datetime) -> int:
    """Weekday with 0=Sunday..6=Saturday."""
    return (d.weekday() + 1) % 7


def is_degenerate(settings: Settings) -> bool:
    """No weekday selected, so no real recurrence exists."""
    return not settings.reminder_days


def next_delay(settings: Settings, now: Optional[datetime] = None) -> int:
    """Milliseconds from now until the next allowed reminder instant.

    Candidates are the reminder time today and on each following day, up to
    SCAN_DAYS in total. Falls back to 24 hours when none qualifies.
    """
    now = now or datetime.now()
    hour, minute = parse_reminder_time(settings.reminder_time)
    allowed = set(settings.reminder_days)
    day = now
    for _ in range(SCAN_DAYS):
        candidate = day.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if weekday_number(candidate) in allowed and candidate > now:
            # timestamp() resolves local wall time, so DST shifts are counted
            return round((candidate.timestamp() - now.timestamp()) * 1000)
        day = day + timedelta(days=1)
    return FALLBACK_DELAY_MS


class ReminderScheduler:
    """Keeps at most one pending reminder timer.

    Call ``on_settings_changed`` whenever settings are replaced; the pending
    timer is cancelled and, if reminders are enabled, a new one is armed from
    the new settings. After firing, the timer re-arms from the latest settings.
    """

    def __init__(
        self,
        notifier,
        timer_factory: Callable = threading.Timer,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.notifier = notifier
        self.timer_factory = timer_factory
        self.clock = clock
        self.settings: Optional[Settings] = None
        self.state = IDLE
        self.last_delay_ms: Optional[int] = None
        self.armed_at: Optional[datetime] = None
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def on_settings_changed(self, settings: Settings) -> None:
        with self._lock:
            self.settings = settings
            self._cancel_locked()
            if settings.reminder_enabled:
                self._arm_locked()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def remaining_ms(self) -> Optional[int]:
        """Milliseconds left until the pending reminder, or None when idle."""
        if self.state != ARMED or self.armed_at is None:
            return None
        elapsed = (self.clock().timestamp() - self.armed_at.timestamp()) * 1000
        return max(0, round(self.last_delay_ms - elapsed))

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.state = IDLE

    def _arm_locked(self) -> None:
        if is_degenerate(self.settings):
            logger.warning("No reminder days selected, falling back to a 24 hour reminder")
        try:
            armed_at = self.clock()
            delay_ms = next_delay(self.settings, armed_at)
        except ValueError as e:
            logger.warning("Reminders not scheduled: %s", e)
            return
        generation = self._generation
        timer = self.timer_factory(delay_ms / 1000, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        self.last_delay_ms = delay_ms
        self.armed_at = armed_at
        self.state = ARMED
        timer.start()
        logger.debug("Reminder armed in %d ms", delay_ms)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.settings is None:
                return
            self._timer = None
            settings = self.settings
        self.notifier.fire(REMINDER_TITLE, settings.reminder_message)
        with self._lock:
            # Settings may have changed while the notification was shown
            if generation != self._generation:
                return
            self._generation += 1
            if self.settings.reminder_enabled:
                self._arm_locked()
            else:
                self.state = IDLE
