from __future__ import annotations

from contextlib import contextmanager


@contextmanager
def blocked_signals(*objs):
    """
    Temporarily silence Qt signals of the given widgets, so programmatic
    setText() calls do not come back as user edits.
    """
    live = [o for o in objs if o is not None]
    for o in live:
        o.blockSignals(True)
    try:
        yield
    finally:
        for o in live:
            o.blockSignals(False)
