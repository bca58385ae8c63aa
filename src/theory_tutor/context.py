"""Process state owned by the tutor: question bank, history log and settings.

The context is handed to the quiz session and the UI instead of living in
module globals. Each mutation is pushed to the ``persist`` callback so the
caller decides how values are stored, and settings replacements are
announced to listeners (the reminder scheduler) before the call returns.
"""
import logging
from dataclasses import replace
from functools import partial
from typing import Callable, Optional

from theory_tutor.db import BANK_KEY, HISTORY_KEY, SETTINGS_KEY, init_db, load_json, save_json
from theory_tutor.history import append_entry, history_from_json, history_to_json, make_entry
from theory_tutor.models import HistoryEntry, Question, Settings
from theory_tutor.seed import builtin_bank

logger = logging.getLogger(__name__)

Persist = Callable[[str, object], None]


class StudyContext:
    def __init__(
        self,
        bank: list,
        history: list[HistoryEntry],
        settings: Settings,
        persist: Optional[Persist] = None,
    ):
        self.bank = bank
        self.history = history
        self.settings = settings
        self._persist = persist
        self._settings_listeners: list[Callable[[Settings], None]] = []

    def _emit(self, key: str, value) -> None:
        if self._persist is not None:
            self._persist(key, value)

    def add_settings_listener(self, listener: Callable[[Settings], None]) -> None:
        self._settings_listeners.append(listener)

    def replace_bank(self, bank: list) -> None:
        bank = list(bank)
        # Persist first so a failed save leaves the current bank in place
        self._emit(BANK_KEY, bank)
        self.bank = bank

    def record_attempt(self, question: Question, correct: bool) -> HistoryEntry:
        entry = make_entry(question, correct)
        self.history = append_entry(self.history, entry)
        self._emit(HISTORY_KEY, history_to_json(self.history))
        return entry

    def replace_settings(self, settings: Settings) -> None:
        self.settings = settings
        self._emit(SETTINGS_KEY, settings.to_dict())
        for listener in self._settings_listeners:
            listener(settings)

    def update_settings(self, **changes) -> Settings:
        """Replace the settings with a copy that has the given fields changed."""
        settings = replace(self.settings, **changes)
        self.replace_settings(settings)
        return settings


def load_context(db_path: str) -> StudyContext:
    """Load persisted state, falling back to defaults for missing or corrupt values."""
    init_db(db_path)
    bank = load_json(db_path, BANK_KEY, None)
    if not isinstance(bank, list):
        if bank is not None:
            logger.warning("Stored bank is not a list, using the built-in bank")
        bank = builtin_bank()
    history = history_from_json(load_json(db_path, HISTORY_KEY, []))
    settings = Settings.from_dict(load_json(db_path, SETTINGS_KEY, None))
    return StudyContext(bank, history, settings, persist=partial(save_json, db_path))


def set_reminders_enabled(context: StudyContext, notifier, enabled: bool) -> bool:
    """Turn reminders on or off. Enabling requires notification permission.

    Returns the resulting enabled state; settings are left untouched when
    permission is denied.
    """
    if enabled and not notifier.request_permission():
        logger.info("Notification permission denied, reminders stay disabled")
        return context.settings.reminder_enabled
    context.update_settings(reminder_enabled=enabled)
    return enabled
