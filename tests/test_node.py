import pytest

from bnstruct.data.attribute import Attribute
from bnstruct.errors import InvalidRelationError
from bnstruct.graph.node import BNNode


@pytest.fixture()
def node():
    return BNNode(Attribute.create("Rain", ["no", "yes"]))


def test_new_node_is_unregistered_and_bare(node):
    assert node.name == "Rain"
    assert node.node_id is None
    assert node.parents == ()
    assert node.children == ()
    assert node.cpd is None


def test_relations_keep_insertion_order(node):
    node.add_parent(3)
    node.add_parent(1)
    node.add_child(7)

    assert node.parents == (3, 1)
    assert node.children == (7,)
    assert node.has_parent(1)
    assert not node.has_child(1)

    node.remove_parent(3)
    node.remove_child(7)
    assert node.parents == (1,)
    assert node.children == ()


def test_duplicate_and_missing_relations_raise(node):
    node.add_parent(1)

    with pytest.raises(InvalidRelationError):
        node.add_parent(1)
    with pytest.raises(InvalidRelationError):
        node.remove_parent(2)
    with pytest.raises(InvalidRelationError):
        node.remove_child(1)

    node.add_child(1)
    with pytest.raises(InvalidRelationError):
        node.add_child(1)


def test_attribute_is_read_only(node):
    with pytest.raises(AttributeError):
        node.attribute = Attribute.create("Other", ["x"])


def test_set_cpd_replaces_model(node):
    node.set_cpd("first")
    node.set_cpd("second")
    assert node.cpd == "second"
