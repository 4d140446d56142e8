"""Custom types."""

from typing import Iterable, Mapping, Tuple, Union

# types allowed by telegraf
FieldValue = Union[int, float, str, bool]
Fields = Tuple[Tuple[str, FieldValue], ...]
Tags = Tuple[Tuple[str, str], ...]

# what the builders accept for tags and fields
Pairs = Union[Mapping[str, object], Iterable[Tuple[str, object]]]
