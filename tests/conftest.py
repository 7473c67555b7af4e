import pytest

from tree_visualizer.core.document import TreeDocument


@pytest.fixture
def document():
    return TreeDocument()


@pytest.fixture
def chain_document():
    """Root "1" -> "2" -> "3"."""
    doc = TreeDocument()
    two = doc.add_child("1")
    doc.add_child(two)
    return doc


@pytest.fixture
def branching_document():
    """
    1
    ├── 2
    │   ├── 5
    │   └── 6
    ├── 3
    └── 4
        └── 7
    """
    doc = TreeDocument()
    for _ in range(3):
        doc.add_child("1")
    doc.add_child("2")
    doc.add_child("2")
    doc.add_child("4")
    return doc
