from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from bnstruct.data.attribute import Attribute, AttributeSet


def _infer_values(column: pd.Series) -> List[Any]:
    if isinstance(column.dtype, pd.CategoricalDtype):
        return list(column.cat.categories)

    values = column.dropna().unique().tolist()
    try:
        return sorted(values)
    except TypeError:
        # mixed types; keep first-seen order
        return values


class DataSet:
    """
    Observed instances over a set of discrete attributes.

    Backed by a pandas DataFrame with one column per attribute.
    The structural layer treats a DataSet as opaque and only hands it
    to the CPD builder.
    """

    def __init__(self, frame: pd.DataFrame, attributes: AttributeSet) -> None:
        missing = [a.name for a in attributes if a.name not in frame.columns]
        if missing:
            raise ValueError(f"Columns missing from frame: {missing}")

        self._frame = frame
        self._attributes = attributes

    @staticmethod
    def from_frame(
        frame: pd.DataFrame,
        attributes: Optional[Iterable[Attribute]] = None,
    ) -> "DataSet":
        """
        Wrap a DataFrame, inferring one nominal attribute per column
        unless the attributes are given explicitly.
        """
        if attributes is None:
            attrs = AttributeSet(
                Attribute.create(str(col), _infer_values(frame[col]))
                for col in frame.columns
            )
            frame = frame.rename(columns=str)
        else:
            attrs = AttributeSet(attributes)

        return DataSet(frame, attrs)

    @staticmethod
    def from_records(
        records: Sequence[Dict[str, Any]],
        attributes: Optional[Iterable[Attribute]] = None,
    ) -> "DataSet":
        return DataSet.from_frame(pd.DataFrame.from_records(records), attributes)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    @property
    def attributes(self) -> AttributeSet:
        return self._attributes.copy()

    @property
    def num_instances(self) -> int:
        return len(self._frame)

    def attribute(self, name: str) -> Attribute:
        attr = self._attributes.get(name)
        if attr is None:
            raise KeyError(f"No attribute named '{name}' in dataset")
        return attr

    def has_attribute(self, attribute: Attribute) -> bool:
        return attribute.name in self._frame.columns

    def column(self, attribute: Attribute) -> pd.Series:
        return self._frame[attribute.name]

    def counts(self, attributes: Sequence[Attribute]) -> Dict[Tuple[Any, ...], int]:
        """
        Joint value counts over the given attributes.

        Keys are value tuples in the order of `attributes`; rows with a
        missing value in any of them are skipped.
        """
        if not attributes:
            return {(): self.num_instances}

        names = [a.name for a in attributes]
        grouped = self._frame.groupby(names, sort=False, observed=True).size()

        result: Dict[Tuple[Any, ...], int] = {}
        for key, n in grouped.items():
            if not isinstance(key, tuple):
                key = (key,)
            result[key] = int(n)
        return result

    def __len__(self) -> int:
        return self.num_instances

    def __repr__(self) -> str:
        return f"DataSet(instances={self.num_instances}, attributes={self._attributes.names})"
