from .core.labels import LabelIndex
from .core.models import LabelCounts, Note
from .errors import (
    InvalidTransition,
    MalformedRecord,
    NotedeckError,
    NotFound,
    PersistenceError,
    StoreClosed,
)
from .vault.store import Store

__version__ = "0.1.0"

__all__ = ['LabelIndex',
           'LabelCounts',
           'Note',
           'InvalidTransition',
           'MalformedRecord',
           'NotedeckError',
           'NotFound',
           'PersistenceError',
           'StoreClosed',
           'Store',
           ]
