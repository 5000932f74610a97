from .labels import LabelIndex
from .models import LabelCounts, Note, generate_note_id, is_valid_note_id, parse_labels

__all__ = ["LabelIndex",
           "LabelCounts",
           "Note",
           "generate_note_id",
           "is_valid_note_id",
           "parse_labels",
           ]
