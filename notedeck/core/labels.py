from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .models import LabelCounts, Note


@dataclass
class LabelIndex:
    """
    label -> number of live notes carrying it.
    Labels whose count drops to zero are removed.
    """
    counts: LabelCounts = field(default_factory=dict)

    def clear(self) -> None:
        self.counts.clear()

    def rebuild(self, notes: Iterable[Note]) -> None:
        self.clear()
        for note in notes:
            self.update(frozenset(), note.label_set)

    def add_note(self, note: Note) -> None:
        self.update(frozenset(), note.label_set)

    def remove_note(self, note: Note) -> None:
        self.update(note.label_set, frozenset())

    def update(self, old_labels: Iterable[str], new_labels: Iterable[str]) -> bool:
        """
        Adjusts counts for one note whose labels went from old to new.
        Returns True if the note's label membership changed.
        """
        old_labels = set(old_labels)
        new_labels = set(new_labels)
        if old_labels == new_labels:
            return False

        for label in old_labels - new_labels:
            n = self.counts.get(label, 0) - 1
            if n > 0:
                self.counts[label] = n
            else:
                self.counts.pop(label, None)

        for label in new_labels - old_labels:
            self.counts[label] = self.counts.get(label, 0) + 1
        return True

    def snapshot(self) -> LabelCounts:
        return dict(self.counts)


def sorted_counts(counts: LabelCounts) -> list[tuple[str, int]]:
    """(label, count) pairs in case-insensitive label order, for display."""
    return sorted(counts.items(), key=lambda kv: (kv[0].casefold(), kv[0]))
