import numpy as np
import pytest

from bnstruct.cpd.cpd_tree import CPDBranch, CPDLeaf
from bnstruct.cpd.tree_builder import CPDTreeBuilder
from bnstruct.data.attribute import Attribute
from bnstruct.data.dataset import DataSet


@pytest.fixture()
def builder():
    return CPDTreeBuilder()


def test_marginal_is_laplace_smoothed(builder, data, attrs):
    tree = builder.build(data, [attrs["A"]], 1)

    assert isinstance(tree.root, CPDLeaf)
    assert tree.parents == []
    assert tree.target == attrs["A"]
    assert np.allclose(tree.distribution(), [0.4, 0.6])
    assert tree.probability("t") == pytest.approx(0.6)


def test_conditional_splits_on_parent_values(builder, data, attrs):
    tree = builder.build(data, [attrs["A"], attrs["B"]], 1)

    assert isinstance(tree.root, CPDBranch)
    assert tree.root.attribute == attrs["A"]
    assert tree.probability("t", {"A": "t"}) == pytest.approx(4 / 7)
    assert tree.probability("t", {attrs["A"]: "f"}) == pytest.approx(0.4)
    assert tree.num_leaves == 2


def test_every_leaf_is_normalized(builder, data, attrs):
    tree = builder.build(data, [attrs["C"], attrs["A"], attrs["D"]], 2)

    leaves = list(tree.leaves())
    assert len(leaves) == 4
    assert [path for path, _ in leaves] == [("f", "f"), ("f", "t"), ("t", "f"), ("t", "t")]
    for _, leaf in leaves:
        assert leaf.distribution.sum() == pytest.approx(1.0)
    assert sum(leaf.num_instances for _, leaf in leaves) == data.num_instances


def test_unseen_configuration_without_smoothing_is_uniform(builder, data, attrs):
    sparse_a = Attribute.create("A", ["f", "t", "never"])
    tree = builder.build(data, [sparse_a, attrs["B"]], 0)

    assert np.allclose(tree.distribution({"A": "never"}), [0.5, 0.5])


def test_lookup_errors(builder, data, attrs):
    tree = builder.build(data, [attrs["A"], attrs["B"]], 1)

    with pytest.raises(KeyError):
        tree.distribution({})
    with pytest.raises(KeyError):
        tree.distribution({"A": "maybe"})
    with pytest.raises(KeyError):
        tree.probability("maybe", {"A": "t"})


def test_invalid_requests_are_rejected(builder, data, attrs):
    with pytest.raises(ValueError):
        builder.build(data, [], 1)
    with pytest.raises(ValueError):
        builder.build(data, [attrs["A"]], -1)
    with pytest.raises(ValueError):
        builder.build(data, [attrs["A"], attrs["A"]], 1)
    with pytest.raises(ValueError):
        builder.build(data, [Attribute.create("Z", ["x"])], 1)


class CountingDataSet(DataSet):
    def __init__(self, frame, attributes):
        super().__init__(frame, attributes)
        self.requests = []

    def counts(self, attributes):
        self.requests.append([a.name for a in attributes])
        return super().counts(attributes)


def test_leaves_are_read_from_joint_counts(builder, frame, data):
    counting = CountingDataSet(frame, data.attributes)
    a, b = counting.attribute("A"), counting.attribute("B")

    tree = builder.build(counting, [a, b], 0)
    joint = counting.counts([a, b])

    assert counting.requests[0] == ["A", "B"]
    for (a_value,), leaf in tree.leaves():
        cells = [joint.get((a_value, v), 0) for v in b.values]
        assert leaf.num_instances == sum(cells)
        assert np.allclose(leaf.distribution, np.array(cells) / sum(cells))
