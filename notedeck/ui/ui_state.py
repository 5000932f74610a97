from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QSettings, QTimer
from PySide6.QtWidgets import QMainWindow, QSplitter

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsKeys:
    UI_GEOMETRY: str = "ui/geometry"
    UI_STATE: str = "ui/windowState"
    UI_SPLITTER: str = "ui/splitter_sizes"


def coerce_sizes(value) -> list[int] | None:
    """QSettings hands back lists, tuples or "200,800" strings depending on backend."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.replace(",", " ").split()
    if not isinstance(value, (list, tuple)):
        return None
    out: list[int] = []
    for x in value:
        try:
            out.append(int(x))
        except (TypeError, ValueError):
            pass
    return out or None


class UiStateStore:
    """Saves/restores window geometry and splitter sizes in QSettings."""

    def __init__(self, *, owner: QMainWindow, settings: QSettings, debounce_ms: int = 400):
        self._owner = owner
        self._settings = settings
        self._restoring = False
        self._timer = QTimer(owner)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(debounce_ms))
        self._timer.timeout.connect(self.save)

    def schedule_save(self) -> None:
        if not self._restoring:
            self._timer.start()

    def restore(self, *, splitter: QSplitter) -> None:
        self._restoring = True
        try:
            geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
            if geo:
                self._owner.restoreGeometry(geo)
            else:
                self._owner.resize(1100, 700)

            st = self._settings.value(SettingsKeys.UI_STATE)
            if st:
                self._owner.restoreState(st)

            sizes = coerce_sizes(self._settings.value(SettingsKeys.UI_SPLITTER))
            if sizes:
                splitter.setSizes(sizes)
        finally:
            self._restoring = False

    def save(self) -> None:
        self._settings.setValue(SettingsKeys.UI_GEOMETRY, self._owner.saveGeometry())
        self._settings.setValue(SettingsKeys.UI_STATE, self._owner.saveState())
        splitter = getattr(self._owner, "splitter", None)
        if splitter is not None:
            self._settings.setValue(SettingsKeys.UI_SPLITTER, splitter.sizes())
        log.debug("UI state saved")
