import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from notedeck.vault.store import Store


@pytest.fixture
def root(tmp_path):
    return tmp_path / "notes"


@pytest.fixture
def store(root, tmp_path):
    s = Store.open(root, recovery_dir=tmp_path / "recovery")
    yield s
    s.close()

