from __future__ import annotations

import argparse
import logging
from pathlib import Path

from notedeck.settings import NOTES_DIR, RECOVERY_DIR


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="notedeck", description="Personal notes with labels and links")
    p.add_argument(
        "--root",
        type=Path,
        default=NOTES_DIR,
        help="Folder holding one <id>.md record per note (default: %(default)s)",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (the log file always gets DEBUG)",
    )
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    from PySide6.QtWidgets import QApplication

    from notedeck.logging_setup import SESSION_ID, install_global_exception_hooks, setup_logging
    from notedeck.ui.main_window import NotesApp
    from notedeck.vault.store import Store

    log = setup_logging(console_level=getattr(logging, args.log_level))
    install_global_exception_hooks(log)

    app = QApplication([])
    with Store.open(args.root, recovery_dir=RECOVERY_DIR) as store:
        for err in store.load_errors:
            log.warning("Record skipped at startup: %s", err)
        win = NotesApp(store)
        win.show()
        log.info("Application started: root=%s notes=%d SID=%s", args.root, len(store), SESSION_ID)
        return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
