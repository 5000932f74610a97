from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QSettings, Qt, QThreadPool, QTimer, QUrl, Slot
from PySide6.QtGui import QDesktopServices, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QFormLayout, QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QMessageBox, QPlainTextEdit, QPushButton, QSplitter,
    QStackedWidget, QVBoxLayout, QWidget,
)

from notedeck.core.labels import sorted_counts
from notedeck.core.models import Note
from notedeck.errors import NotedeckError, NotFound
from notedeck.services.markdown_renderer import MarkdownRenderer
from notedeck.services.titles import is_http_url
from notedeck.settings import APP_NAME, AUTOSAVE_DEBOUNCE_MS, TITLE_FETCH_TIMEOUT_S
from notedeck.ui.autosave import PendingEdits
from notedeck.ui.qt_utils import blocked_signals
from notedeck.ui.ui_state import UiStateStore
from notedeck.ui.view_state import View, ViewState
from notedeck.ui.workers import TitleFetchWorker
from notedeck.vault.store import Store

log = logging.getLogger(__name__)

_NOTE_ID_ROLE = Qt.UserRole
_LABEL_ROLE = Qt.UserRole + 1


class NoteEditor(QWidget):
    def __init__(self):
        super().__init__()
        self.title = QLineEdit()
        self.title.setPlaceholderText("Title")
        self.labels = QLineEdit()
        self.labels.setPlaceholderText("Labels (space separated)")
        self.link = QLineEdit()
        self.link.setPlaceholderText("Link")
        self.markdown = QPlainTextEdit()

        form = QFormLayout()
        form.addRow("Title", self.title)
        form.addRow("Labels", self.labels)
        form.addRow("Link", self.link)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(QLabel("Notes"))
        layout.addWidget(self.markdown, 1)

    def set_note(self, note: Note, unsaved: Optional[dict[str, str]] = None) -> None:
        """Show `note`, with any edits the Store has not accepted yet on top."""
        values = {
            "title": note.title,
            "labels": " ".join(note.labels),
            "link": note.link or "",
            "markdown": note.markdown,
        }
        values.update(unsaved or {})
        with blocked_signals(self.title, self.labels, self.link, self.markdown):
            self.title.setText(values["title"])
            self.labels.setText(values["labels"])
            self.link.setText(values["link"])
            self.markdown.setPlainText(values["markdown"])


class NotesApp(QMainWindow):
    """
    Thin shell over the Store: keeps a snapshot (notes + label counts),
    forwards every user intent as one Store command, then re-renders.
    """

    def __init__(self, store: Store, *, settings: Optional[QSettings] = None):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.store = store
        self.state = ViewState()
        self.renderer = MarkdownRenderer()

        self._notes: list[Note] = []
        self._label_counts: dict[str, int] = {}
        self._label_filter: set[str] = set()

        self._pending = PendingEdits()

        self._title_pool = QThreadPool.globalInstance()
        self._title_req_id = 0

        # --- navbar ---
        self.home_btn = QPushButton("Home")
        self.home_btn.setToolTip("See all notes")
        self.new_btn = QPushButton("New")
        self.new_btn.setToolTip("Add new note (uses a link from the clipboard)")
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search titles… (Ctrl+P)")
        self.search_results = QListWidget()
        self.search_results.setMaximumHeight(160)
        self.search_results.hide()

        navbar = QHBoxLayout()
        navbar.addWidget(self.home_btn)
        navbar.addWidget(self.new_btn)
        navbar.addWidget(self.search, 1)

        # --- columns ---
        self.label_list = QListWidget()
        self.label_list.setToolTip("Check labels to filter the list")

        self.note_list = QListWidget()
        self.note_view = QWebEngineView()
        self.editor = NoteEditor()

        self.stack = QStackedWidget()
        self._pages = {
            View.LIST: self.stack.addWidget(self.note_list),
            View.NOTE: self.stack.addWidget(self.note_view),
            View.EDIT: self.stack.addWidget(self.editor),
        }

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(self.label_list)
        self.splitter.addWidget(self.stack)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 4)

        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.addLayout(navbar)
        root_layout.addWidget(self.search_results)
        root_layout.addWidget(self.splitter, 1)
        self.setCentralWidget(root)

        # Autosave debounce
        self.save_timer = QTimer(self)
        self.save_timer.setInterval(AUTOSAVE_DEBOUNCE_MS)
        self.save_timer.setSingleShot(True)
        self.save_timer.timeout.connect(self._flush_pending)

        # Signals
        self.home_btn.clicked.connect(self.switch_to_list)
        self.new_btn.clicked.connect(self.on_add_new_note)
        self.search.textChanged.connect(self.on_search)
        self.search.returnPressed.connect(lambda: self.on_select_search_result(0))
        self.search_results.itemActivated.connect(
            lambda it: self.on_select_search_result(self.search_results.row(it))
        )
        self.search_results.itemClicked.connect(
            lambda it: self.on_select_search_result(self.search_results.row(it))
        )
        self.note_list.itemActivated.connect(self._on_list_item)
        self.note_list.itemClicked.connect(self._on_list_item)
        self.label_list.itemChanged.connect(self._on_label_toggled)

        self.editor.title.textChanged.connect(lambda s: self._on_field_changed("title", s))
        self.editor.labels.textChanged.connect(lambda s: self._on_field_changed("labels", s))
        self.editor.link.textChanged.connect(lambda s: self._on_field_changed("link", s))
        self.editor.markdown.textChanged.connect(
            lambda: self._on_field_changed("markdown", self.editor.markdown.toPlainText())
        )

        self._bind_shortcuts()

        self.ui_state = UiStateStore(owner=self, settings=settings or QSettings(APP_NAME, APP_NAME))
        self.ui_state.restore(splitter=self.splitter)
        self.splitter.splitterMoved.connect(lambda *_: self.ui_state.schedule_save())

        self.refresh_snapshot()
        self._render_view()
        log.info("Window ready: notes=%d labels=%d", len(self._notes), len(self._label_counts))

    def _bind_shortcuts(self) -> None:
        QShortcut(QKeySequence("Ctrl+E"), self).activated.connect(self.toggle_edit)
        QShortcut(QKeySequence("Ctrl+P"), self).activated.connect(self._focus_search)
        QShortcut(QKeySequence("Escape"), self).activated.connect(self._clear_search)

        # Only while the rendered note has focus, so editors keep Del/Enter.
        delete = QShortcut(QKeySequence(Qt.Key_Delete), self.note_view)
        delete.activated.connect(self.delete_active_note)
        delete.setContext(Qt.WidgetWithChildrenShortcut)
        open_link = QShortcut(QKeySequence(Qt.Key_Return), self.note_view)
        open_link.activated.connect(self.open_active_link)
        open_link.setContext(Qt.WidgetWithChildrenShortcut)

    def closeEvent(self, event):  # type: ignore[override]
        """Hand pending edits to the Store before the window goes away."""
        if self.save_timer.isActive():
            self.save_timer.stop()
        self._flush_pending()
        self.ui_state.save()
        super().closeEvent(event)

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        ui_state = getattr(self, "ui_state", None)
        if ui_state is not None:
            ui_state.schedule_save()

    # ───────────────────────── snapshot & rendering ─────────────────────────

    def refresh_snapshot(self) -> None:
        if self._label_filter:
            self._notes = self.store.notes_with_labels(include=self._label_filter)
        else:
            self._notes = self.store.get_notes()
        self._label_counts = self.store.get_label_counts()
        # labels that disappeared cannot filter anymore
        self._label_filter &= set(self._label_counts)

        with blocked_signals(self.note_list):
            self.note_list.clear()
            for note in self._notes:
                item = QListWidgetItem(note.title or "(untitled)")
                item.setData(_NOTE_ID_ROLE, note.id)
                if note.labels:
                    item.setToolTip(" ".join(note.labels))
                self.note_list.addItem(item)

        with blocked_signals(self.label_list):
            self.label_list.clear()
            for label, count in sorted_counts(self._label_counts):
                item = QListWidgetItem(f"{label} ({count})")
                item.setData(_LABEL_ROLE, label)
                item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
                item.setCheckState(Qt.Checked if label in self._label_filter else Qt.Unchecked)
                self.label_list.addItem(item)

    def _active_note(self) -> Optional[Note]:
        if self.state.active_note_id is None:
            return None
        try:
            return self.store.get_note(self.state.active_note_id)
        except NotFound:
            log.warning("Active note vanished: %s", self.state.active_note_id)
            self.state.back()
            return None

    def _render_view(self) -> None:
        note = self._active_note()
        view = self.state.view
        if view is View.NOTE and note is not None:
            self.note_view.setHtml(self.renderer.render_page(note))
            self.note_view.setFocus()
        elif view is View.EDIT and note is not None:
            self.editor.set_note(note, self._pending.fields_for(note.id))
            self.editor.title.setFocus()
        self.stack.setCurrentIndex(self._pages[self.state.view])

    # ───────────────────────── view transitions ─────────────────────────

    def switch_to_list(self) -> None:
        self._flush_pending()
        self.state.back()
        self.refresh_snapshot()
        self._render_view()
        self._focus_search()

    def switch_to_note(self, note_id: str) -> None:
        self._flush_pending()
        self.state.select(note_id)
        self._render_view()

    def toggle_edit(self) -> None:
        self._flush_pending()
        self.state.toggle_edit()
        self._render_view()

    def _on_list_item(self, item: QListWidgetItem) -> None:
        self.switch_to_note(item.data(_NOTE_ID_ROLE))

    def _on_label_toggled(self, item: QListWidgetItem) -> None:
        label = item.data(_LABEL_ROLE)
        if item.checkState() == Qt.Checked:
            self._label_filter.add(label)
        else:
            self._label_filter.discard(label)
        self.refresh_snapshot()

    # ───────────────────────── search ─────────────────────────

    def on_search(self, text: str) -> None:
        matches = self.store.search(text)
        self.search_results.clear()
        for note in matches:
            item = QListWidgetItem(note.title or "(untitled)")
            item.setData(_NOTE_ID_ROLE, note.id)
            self.search_results.addItem(item)
        self.search_results.setVisible(bool(matches))
        if matches:
            self.search_results.setCurrentRow(0)

    def on_select_search_result(self, row: int) -> None:
        item = self.search_results.item(row)
        if item is None:
            return
        note_id = item.data(_NOTE_ID_ROLE)
        self._clear_search()
        self.switch_to_note(note_id)

    def _focus_search(self) -> None:
        self.search.setFocus()
        self.search.selectAll()

    def _clear_search(self) -> None:
        with blocked_signals(self.search):
            self.search.clear()
        self.search_results.hide()
        # may run inside one of the list's own signals
        QTimer.singleShot(0, self.search_results.clear)

    # ───────────────────────── commands ─────────────────────────

    def _run_command(self, what: str, fn: Callable, *args):
        try:
            return fn(*args)
        except NotedeckError as exc:
            log.exception("%s failed", what)
            QMessageBox.warning(self, APP_NAME, f"{what} failed:\n{exc}")
            return None

    def on_add_new_note(self) -> None:
        self._flush_pending()
        clipboard_text = (QGuiApplication.clipboard().text() or "").strip()
        if is_http_url(clipboard_text):
            self._request_title(clipboard_text)
            return
        note = self._run_command("Create note", self.store.new_note, "")
        if note is not None:
            self._enter_new_note(note)

    def _request_title(self, url: str) -> None:
        self._title_req_id += 1
        log.info("Resolving title for %s", url)
        self.statusBar().showMessage(f"Fetching title for {url}…")
        worker = TitleFetchWorker(req_id=self._title_req_id, url=url, timeout=TITLE_FETCH_TIMEOUT_S)
        worker.signals.finished.connect(self._on_title_fetched)
        self._title_pool.start(worker)

    @Slot(int, str, str)
    def _on_title_fetched(self, req_id: int, url: str, title: str) -> None:
        # a newer request superseded this one
        if req_id != self._title_req_id:
            return
        self.statusBar().clearMessage()
        note = self._run_command("Create note", self.store.new_note, title or url, url)
        if note is not None:
            self._enter_new_note(note)

    def _enter_new_note(self, note: Note) -> None:
        self.state.new_note(note.id)
        self.refresh_snapshot()
        self._render_view()

    def delete_active_note(self) -> None:
        if self.state.view is not View.NOTE or self.state.active_note_id is None:
            return
        note_id = self.state.active_note_id
        self._run_command("Delete note", self.store.delete_note, note_id)
        if note_id in self.store:
            return
        self.state.deleted()
        self.refresh_snapshot()
        self._render_view()

    def open_active_link(self) -> None:
        if self.state.view is not View.NOTE:
            return
        note = self._active_note()
        if note is not None and note.link:
            log.info("Opening link: %s", note.link)
            QDesktopServices.openUrl(QUrl(note.link))

    # ───────────────────────── editor autosave ─────────────────────────

    def _on_field_changed(self, field: str, value: str) -> None:
        if self.state.view is not View.EDIT or self.state.active_note_id is None:
            return
        self._pending.set(self.state.active_note_id, field, value)
        self.save_timer.start()

    def _flush_pending(self) -> None:
        if self.save_timer.isActive():
            self.save_timer.stop()
        if not self._pending:
            return
        errors = self._pending.flush(self.store)
        if errors:
            lines = "\n".join(f"{field}: {exc}" for (_, field), exc in errors.items())
            QMessageBox.warning(self, APP_NAME, f"Some edits could not be saved:\n{lines}")
        self.refresh_snapshot()
