from .filesystem import atomic_write_text, write_recovery_copy
from .records import parse_record, read_record, record_path, render_record
from .store import Store

__all__ = ["atomic_write_text",
           "write_recovery_copy",
           "parse_record",
           "read_record",
           "record_path",
           "render_record",
           "Store",
           ]
