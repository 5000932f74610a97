from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from notedeck.errors import InvalidTransition

log = logging.getLogger(__name__)


class View(enum.Enum):
    LIST = "list"
    NOTE = "note"
    EDIT = "edit"


@dataclass
class ViewState:
    """
    Which view the shell shows and which note it is about.

        LIST --select--> NOTE --edit--> EDIT
        LIST <--back---- NOTE <-close-- EDIT
        any  --new_note-----------------> EDIT
        NOTE --deleted--> LIST

    NOTE and EDIT always have an active note; LIST never does.
    """
    view: View = View.LIST
    active_note_id: Optional[str] = None

    def select(self, note_id: str) -> None:
        if not note_id:
            raise InvalidTransition("select() needs a note id")
        self._go(View.NOTE, note_id)

    def edit(self) -> None:
        self._require(View.NOTE, "edit")
        self._go(View.EDIT, self.active_note_id)

    def close_editor(self) -> None:
        self._require(View.EDIT, "close_editor")
        self._go(View.NOTE, self.active_note_id)

    def toggle_edit(self) -> None:
        if self.view is View.NOTE:
            self.edit()
        elif self.view is View.EDIT:
            self.close_editor()
        else:
            log.debug("toggle_edit ignored in %s view", self.view.value)

    def new_note(self, note_id: str) -> None:
        if not note_id:
            raise InvalidTransition("new_note() needs a note id")
        self._go(View.EDIT, note_id)

    def deleted(self) -> None:
        self._require(View.NOTE, "deleted")
        self._go(View.LIST, None)

    def back(self) -> None:
        self._go(View.LIST, None)

    def _require(self, view: View, action: str) -> None:
        if self.view is not view:
            raise InvalidTransition(f"{action}() not allowed in {self.view.value} view")

    def _go(self, view: View, note_id: Optional[str]) -> None:
        log.debug("view %s -> %s note=%s", self.view.value, view.value, note_id)
        self.view = view
        self.active_note_id = note_id
