import pandas as pd
import pytest

from bnstruct.data.attribute import Attribute, AttributeSet
from bnstruct.data.dataset import DataSet


def test_from_frame_infers_sorted_values(data):
    assert data.attributes.names == ["A", "B", "C", "D"]
    assert data.attribute("A").values == ("f", "t")
    assert data.num_instances == 8
    assert len(data) == 8


def test_from_frame_keeps_categorical_order():
    frame = pd.DataFrame(
        {"Size": pd.Categorical(["s", "l"], categories=["s", "m", "l"])}
    )
    ds = DataSet.from_frame(frame)

    assert ds.attribute("Size").values == ("s", "m", "l")


def test_from_records_with_explicit_attributes():
    weather = Attribute.create("Weather", ["sun", "rain", "snow"])
    ds = DataSet.from_records(
        [{"Weather": "sun"}, {"Weather": "rain"}],
        attributes=[weather],
    )

    assert ds.attribute("Weather") is weather
    assert ds.column(weather).tolist() == ["sun", "rain"]


def test_counts(data, attrs):
    assert data.counts([attrs["A"]]) == {("t",): 5, ("f",): 3}

    joint = data.counts([attrs["A"], attrs["B"]])
    assert joint[("t", "t")] == 3
    assert joint[("f", "f")] == 2
    assert sum(joint.values()) == 8
    assert data.counts([]) == {(): 8}


def test_missing_columns_are_rejected(frame):
    with pytest.raises(ValueError):
        DataSet(frame, AttributeSet([Attribute.create("Z", ["x"])]))
    with pytest.raises(KeyError):
        DataSet.from_frame(frame).attribute("Z")


def test_attribute_set_registry():
    a = Attribute.create("A", [0, 1])
    b = Attribute.create("B", [0, 1])
    registry = AttributeSet([a])
    registry.add(b)

    assert registry.names == ["A", "B"]
    assert "A" in registry and a in registry
    assert Attribute.create("A", [1, 2]) not in registry

    with pytest.raises(ValueError):
        registry.add(Attribute.create("A", [5]))

    registry.remove(a)
    assert list(registry) == [b]
    with pytest.raises(KeyError):
        registry.remove(a)


def test_attribute_rejects_duplicate_values():
    with pytest.raises(ValueError):
        Attribute.create("A", ["x", "x"])
    assert Attribute.create("A", ["x", "y"]).index_of("y") == 1
