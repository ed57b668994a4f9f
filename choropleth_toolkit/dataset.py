"""Region data model and derived indexes.

Purpose
-------
A :class:`Dataset` is an ordered collection of :class:`Region` records, each
holding ``date -> label -> value`` data. :class:`DatasetIndex` derives the
date axis, the label set and the color domain the map needs from it.

Concepts and structure
----------------------
- The date axis comes from one representative region (the first) and is
  sorted lexicographically; dates are fixed-format strings such as
  ``"2013-01-01"``.
- Labels keep their first-seen insertion order.
- The color domain for a label is always computed from the *first* date of
  the axis, whatever date is currently selected. Values at later dates may
  therefore fall outside the domain; the color scale clamps them.

Examples
--------
>>> data = Dataset.from_records([
...     {"id": "R1", "name": "One", "dates": {"2013-01-01": {"a": 1.0}}},
...     {"id": "R2", "name": "Two", "dates": {"2013-01-01": {"a": 3.0}}},
... ])
>>> index = DatasetIndex(data)
>>> index.domain(0)
ColorDomain(min=1.0, max=3.0)
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .color_scale import ColorDomain
from .errors import MissingDataError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

_WORD_SPLIT = re.compile(r"[_\-\s]+")


def label_text(label: str) -> str:
    """Turn a raw metric key into display text.

    >>> label_text("streams_gt_30")
    'Streams Gt 30'
    """
    words = [w for w in _WORD_SPLIT.split(str(label)) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def label_names(dates: Mapping[str, Mapping[str, Any]]) -> List[str]:
    """Collect label keys across ``dates`` in first-seen order."""
    seen: Dict[str, None] = {}
    for values in dates.values():
        for label in values:
            seen.setdefault(label, None)
    return list(seen)


@dataclass
class Region:
    """One geographic unit with per-date, per-label values.

    Parameters
    ----------
    id : Any
        Stable identifier, unique within a dataset.
    name : str
        Display name shown in the tooltip.
    dates : Mapping[str, Mapping[str, float]]
        ``date -> label -> value`` data.
    geometry : Any, optional
        Boundary geometry, passed through untouched to the projection.
    """

    id: Any
    name: str
    dates: Mapping[str, Mapping[str, float]]
    geometry: Any = None

    def value(self, date: str, label: str) -> float:
        """Return the datum for ``(date, label)``.

        Raises
        ------
        MissingDataError
            If the date or label is absent, or the stored value is ``None``
            or NaN.
        """
        try:
            raw = self.dates[date][label]
        except KeyError:
            raise MissingDataError(
                f"Region {self.id!r} has no value for date={date!r}, label={label!r}."
            ) from None
        if raw is None:
            raise MissingDataError(
                f"Region {self.id!r} has a null value for date={date!r}, label={label!r}."
            )
        value = float(raw)
        if math.isnan(value):
            raise MissingDataError(
                f"Region {self.id!r} has a NaN value for date={date!r}, label={label!r}."
            )
        return value


@dataclass
class Dataset(Sequence[Region]):
    """Ordered regions; position ``i`` pairs with the ``i``-th geometric feature."""

    regions: List[Region] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.regions = list(self.regions)
        ids = [region.id for region in self.regions]
        if len(set(ids)) != len(ids):
            raise ValueError("Region ids must be unique within a dataset.")

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        geometries: Optional[Iterable[Any]] = None,
    ) -> "Dataset":
        """Build a dataset from ``{"id", "name", "dates"}`` records.

        ``geometries``, when given, is zipped onto the records positionally.
        """
        records = list(records)
        geoms = list(geometries) if geometries is not None else [None] * len(records)
        if len(geoms) != len(records):
            raise ValueError(
                f"Got {len(geoms)} geometries for {len(records)} records."
            )
        regions = [
            Region(
                id=rec["id"],
                name=str(rec.get("name", rec["id"])),
                dates=rec.get("dates", {}),
                geometry=geom if geom is not None else rec.get("geometry"),
            )
            for rec, geom in zip(records, geoms)
        ]
        return cls(regions)

    def __getitem__(self, index):  # type: ignore[override]
        return self.regions[index]

    def __len__(self) -> int:
        return len(self.regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def by_id(self, region_id: Any) -> Region:
        for region in self.regions:
            if region.id == region_id:
                return region
        raise KeyError(f"Unknown region id {region_id!r}.")


class DatasetIndex:
    """Date axis, label set and color domains derived from a :class:`Dataset`.

    Parameters
    ----------
    dataset : Dataset
        Source regions. May be empty, in which case the axes are empty and
        :meth:`domain` raises :class:`MissingDataError`.
    text_transform : callable, optional
        Label display transform; defaults to :func:`label_text`.
    """

    def __init__(
        self,
        dataset: Dataset,
        text_transform: Callable[[str], str] = label_text,
    ) -> None:
        self._dataset = dataset
        self._text_transform = text_transform
        if len(dataset) == 0:
            self._dates: tuple[str, ...] = ()
            self._labels: tuple[str, ...] = ()
        else:
            representative = dataset[0].dates
            self._dates = tuple(sorted(representative.keys()))
            self._labels = tuple(label_names(representative))

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def dates(self) -> tuple[str, ...]:
        return self._dates

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def date_count(self) -> int:
        return len(self._dates)

    @property
    def label_count(self) -> int:
        return len(self._labels)

    @property
    def first_date(self) -> str:
        """Date every color domain is computed from."""
        if not self._dates:
            raise MissingDataError("Dataset is empty; there is no first date.")
        return self._dates[0]

    def label(self, index: int) -> str:
        return self._labels[index]

    def label_text(self, index: int) -> str:
        return self._text_transform(self._labels[index])

    def domain(self, label_index: int) -> ColorDomain:
        """Return ``(min, max)`` of ``label`` at the first date across regions.

        Regions without a first-date value are skipped; if none has one the
        computation fails.

        Raises
        ------
        MissingDataError
            If the dataset is empty or no region has a value.
        """
        if len(self._dataset) == 0:
            raise MissingDataError("Cannot compute a color domain for an empty dataset.")
        first_date = self.first_date
        label = self._labels[label_index]

        values: List[float] = []
        for region in self._dataset:
            try:
                values.append(region.value(first_date, label))
            except MissingDataError as exc:
                logger.debug("domain(%s): skipping %s", label, exc)
        if not values:
            raise MissingDataError(
                f"No region has a value for label={label!r} at {first_date!r}."
            )
        arr = np.asarray(values, dtype=float)
        return ColorDomain(float(arr.min()), float(arr.max()))


__all__ = ["Dataset", "DatasetIndex", "Region", "label_names", "label_text"]
