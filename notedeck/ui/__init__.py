from .view_state import View, ViewState

__all__ = ["View", "ViewState"]
