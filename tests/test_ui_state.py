from notedeck.ui.ui_state import coerce_sizes


def test_coerce_sizes():
    assert coerce_sizes([200, "800"]) == [200, 800]
    assert coerce_sizes("200,800") == [200, 800]
    assert coerce_sizes("200 x 800") == [200, 800]
    assert coerce_sizes(None) is None
    assert coerce_sizes("") is None
    assert coerce_sizes(42) is None
