"""Rendering of points as Telegraf line protocol.

A point is written as a single line::

    <measurement>[,<tag_key>=<tag_value>]* <field_key>=<field_value>[,...] [<timestamp>]

and terminated with a newline before it is handed to a transport.
"""

import math
import numbers
from typing import TYPE_CHECKING

from .exceptions import EncodingError
from .typing import FieldValue

if TYPE_CHECKING:
    from .point import Point

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# measurement, tag keys, tag values and field keys
_IDENTIFIER_ESCAPES = str.maketrans({",": r"\,", " ": r"\ ", "=": r"\="})
# quoted string field values
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})


def to_field_value(value: object) -> FieldValue:
    """Convert a value into one of the four types a field can hold.

    Any integral or real number (e.g. numpy scalars) is accepted and converted
    to a plain int or float.

    Args:
        value: The value to convert.

    Returns:
        A bool, int, float or str.

    Raises:
        EncodingError: If the value has no line protocol representation.
    """
    # bool first, it is a subclass of int
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, numbers.Integral):
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise EncodingError(f"Integer field value {value} does not fit in 64 bits.")
        return value
    if isinstance(value, numbers.Real):
        value = float(value)
        if not math.isfinite(value):
            raise EncodingError(f"Float field value {value} is not finite.")
        return value
    raise EncodingError(
        f"Unsupported field value {value!r} of type {type(value).__name__}."
    )


def escape_identifier(text: str) -> str:
    """Escape commas, spaces and equals signs with a backslash."""
    return text.translate(_IDENTIFIER_ESCAPES)


def format_field_value(value: FieldValue) -> str:
    """Render a single field value.

    Integers get an ``i`` suffix, floats always carry a decimal point or an
    exponent, booleans are ``true``/``false`` and strings are double quoted.
    """
    value = to_field_value(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        # repr always yields "20.0" or "1e+20", never a bare "20"
        return repr(value)
    return '"' + value.translate(_STRING_ESCAPES) + '"'


def _format_timestamp(timestamp: object) -> str:
    if isinstance(timestamp, bool) or not isinstance(timestamp, numbers.Integral):
        raise EncodingError(f"Timestamp {timestamp!r} is not an integer.")
    timestamp = int(timestamp)
    if not INT64_MIN <= timestamp <= INT64_MAX:
        raise EncodingError(f"Timestamp {timestamp} does not fit in 64 bits.")
    return str(timestamp)


def to_line(point: "Point") -> str:
    """Render a point as one line of line protocol, without the newline.

    Args:
        point: The point to render.

    Returns:
        The rendered line.

    Raises:
        EncodingError: If the measurement, a tag key or a field key is empty,
            the point has no fields, or a field value or the timestamp cannot
            be represented.
    """
    if not point.measurement:
        raise EncodingError("Measurement name must not be empty.")
    if not point.fields:
        raise EncodingError(
            f"Point '{point.measurement}' has no fields, at least one is required."
        )

    series = [escape_identifier(point.measurement)]
    for key, value in point.tags:
        if not key:
            raise EncodingError(f"Empty tag key in point '{point.measurement}'.")
        series.append(f"{escape_identifier(key)}={escape_identifier(value)}")

    field_set = []
    for key, value in point.fields:
        if not key:
            raise EncodingError(f"Empty field key in point '{point.measurement}'.")
        field_set.append(f"{escape_identifier(key)}={format_field_value(value)}")

    line = f"{','.join(series)} {','.join(field_set)}"
    if point.timestamp is not None:
        line += f" {_format_timestamp(point.timestamp)}"
    return line


def encode_point(point: "Point") -> bytes:
    """Encode a point as a newline terminated, UTF-8 encoded line."""
    return (to_line(point) + "\n").encode("utf-8")
