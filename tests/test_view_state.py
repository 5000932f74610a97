import pytest

from notedeck.errors import InvalidTransition
from notedeck.ui.view_state import View, ViewState

NID = "a" * 32


def test_list_select_edit_close_back():
    st = ViewState()
    st.select(NID)
    assert (st.view, st.active_note_id) == (View.NOTE, NID)
    st.edit()
    assert st.view is View.EDIT
    st.close_editor()
    assert st.view is View.NOTE
    st.back()
    assert (st.view, st.active_note_id) == (View.LIST, None)


def test_new_note_goes_straight_to_edit():
    st = ViewState()
    st.new_note(NID)
    assert (st.view, st.active_note_id) == (View.EDIT, NID)


def test_toggle_edit():
    st = ViewState()
    st.toggle_edit()
    assert st.view is View.LIST

    st.select(NID)
    st.toggle_edit()
    assert st.view is View.EDIT
    st.toggle_edit()
    assert st.view is View.NOTE


def test_deleted_returns_to_list():
    st = ViewState()
    st.select(NID)
    st.deleted()
    assert (st.view, st.active_note_id) == (View.LIST, None)


def test_invalid_transitions():
    st = ViewState()
    with pytest.raises(InvalidTransition):
        st.edit()
    with pytest.raises(InvalidTransition):
        st.deleted()
    with pytest.raises(InvalidTransition):
        st.select("")
    st.new_note(NID)
    with pytest.raises(InvalidTransition):
        st.deleted()
