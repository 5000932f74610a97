from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from notedeck.services.titles import fetch_title


class TitleFetchSignals(QObject):
    """
    finished(req_id, url, title)   title is "" when none could be resolved
    """
    finished = Signal(int, str, str)


class TitleFetchWorker(QRunnable):
    """
    Resolves a page title off the UI thread.
    No widgets and no Store access here; the window creates the note.
    """

    def __init__(self, *, req_id: int, url: str, timeout: float):
        super().__init__()
        self.req_id = req_id
        self.url = url
        self.timeout = timeout
        self.signals = TitleFetchSignals()

    def run(self) -> None:
        title = fetch_title(self.url, timeout=self.timeout)
        self.signals.finished.emit(self.req_id, self.url, title or "")
