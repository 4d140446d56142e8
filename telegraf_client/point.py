"""The Point record and helpers for building points."""

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from .exceptions import EncodingError
from .protocol import to_field_value, to_line
from .typing import Fields, Pairs, Tags

TAG = "tag"
FIELD = "field"
TIMESTAMP = "timestamp"


def _pairs(items: Pairs) -> tuple:
    if isinstance(items, Mapping):
        items = items.items()
    return tuple((key, value) for key, value in items)


@dataclass(eq=True, frozen=True)
class Point:
    """A single metric observation.

    Tags and fields may be given as mappings or as iterables of (key, value)
    pairs; they are stored as tuples in insertion order. A point is not
    validated on construction, the encoder rejects points without fields or
    with an empty measurement.

    Attributes:
        measurement: Name of the metric.
        tags: Ordered (key, value) text pairs.
        fields: Ordered (key, value) pairs, at least one is required to encode.
        timestamp: Nanoseconds since the epoch. If None, the agent uses the time
            it received the point.
    """

    measurement: str
    tags: Tags = ()
    fields: Fields = ()
    timestamp: Optional[int] = None

    def __post_init__(self) -> None:
        tags = tuple((str(key), str(value)) for key, value in _pairs(self.tags))
        fields = tuple((str(key), value) for key, value in _pairs(self.fields))
        object.__setattr__(self, "tags", tags)
        object.__setattr__(self, "fields", fields)

    def __str__(self) -> str:
        return to_line(self)


def point(
    measurement: str,
    *fields: tuple,
    tags: Pairs = (),
    timestamp: Optional[int] = None,
    **field_kwargs: Any,
) -> Point:
    """Shorthand for building a Point.

    Fields are given as (key, value) pairs, as keyword arguments, or both.
    Field values are converted to plain int, float, str or bool and tag values
    to str.

    Example:
        >>> str(point("cpu", ("usage", 20.5), tags={"host": "a"}, timestamp=100))
        'cpu,host=a usage=20.5 100'
        >>> str(point("mem", used=10))
        'mem used=10i'

    Args:
        measurement: Name of the measurement.
        fields: (key, value) pairs of fields.
        tags: Mapping or iterable of (key, value) pairs.
        timestamp: Optional timestamp in nanoseconds.
        field_kwargs: Further fields. Fields named ``tags`` or ``timestamp`` have
            to be passed as pairs.

    Raises:
        EncodingError: If a field value cannot be represented.
    """
    field_set = fields + tuple(field_kwargs.items())
    return Point(
        measurement=measurement,
        tags=tuple((key, str(value)) for key, value in _pairs(tags)),
        fields=tuple((key, to_field_value(value)) for key, value in field_set),
        timestamp=timestamp,
    )


class Metric(ABC):
    """Base class for objects that know how to turn themselves into a Point.

    Used via Client.write_metric.
    """

    @abstractmethod
    def to_point(self) -> Point:
        ...


def point_from_dataclass(record: Any, measurement: Optional[str] = None) -> Point:
    """Build a Point from a dataclass instance.

    Every dataclass field becomes a line protocol field unless its metadata
    says otherwise::

        @dataclass
        class Cpu:
            __measurement__ = "cpu"

            usage: float
            host: str = field(metadata={"telegraf": "tag"})
            ts: int = field(default=0, metadata={"telegraf": "timestamp"})

    Attributes whose value is None are left out.

    Args:
        record: The dataclass instance.
        measurement: Name of the measurement. Defaults to the ``__measurement__``
            attribute of the class, or the class name.

    Returns:
        The Point.

    Raises:
        TypeError: If record is not a dataclass instance.
        EncodingError: If a value cannot be represented or there is more than
            one timestamp.
    """
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"{record!r} is not a dataclass instance.")
    cls = type(record)
    if measurement is None:
        measurement = getattr(cls, "__measurement__", cls.__name__)

    tags = []
    fields = []
    timestamp = None
    for attribute in dataclasses.fields(record):
        value = getattr(record, attribute.name)
        if value is None:
            continue
        kind = attribute.metadata.get("telegraf", FIELD)
        if kind == TAG:
            tags.append((attribute.name, str(value)))
        elif kind == TIMESTAMP:
            if timestamp is not None:
                raise EncodingError(f"{cls.__name__} has more than one timestamp.")
            timestamp = int(value)
        elif kind == FIELD:
            fields.append((attribute.name, to_field_value(value)))
        else:
            raise EncodingError(
                f"Unknown telegraf attribute kind '{kind}' on {cls.__name__}."
            )
    return Point(
        measurement, tags=tuple(tags), fields=tuple(fields), timestamp=timestamp
    )
