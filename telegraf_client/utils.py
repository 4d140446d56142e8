"""Utility functions."""

import math
import os
from configparser import ConfigParser
from typing import Iterable, List, Tuple

from .typing import FieldValue

INTEGER_SUFFIX = "i"


def parse_config(config_file: str, section: str) -> dict:
    """Load a section of an INI config file as a dictionary.

    Args:
        config_file: Path to the config file.
        section: Name of the section.

    Returns:
        Dictionary containing the configuration of the section.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If the section does not exist.
    """
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file '{config_file}' not found.")
    config = ConfigParser()
    config.read(config_file, encoding="utf-8")
    if not config.has_section(section):
        raise KeyError(f"No section [{section}] in '{config_file}'.")
    return dict(config[section])


def parse_pairs(pairs: Iterable[str]) -> List[Tuple[str, str]]:
    """Split key=value strings into (key, value) tuples.

    Only the first equals sign separates key and value, so values may contain
    equals signs themselves.

    Raises:
        ValueError: If a string has no equals sign or an empty key.
    """
    result = []
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator or not key:
            raise ValueError(f"'{pair}' is not of the form key=value.")
        result.append((key, value))
    return result


def parse_field_value(text: str) -> FieldValue:
    """Interpret a field value given as text, as on the command line.

    ``10i`` is an integer, ``true``/``false`` are booleans, a finite decimal
    number is a float, a double quoted value is a string without its quotes,
    and everything else is a string as well, including ``inf``, ``nan`` and
    numbers with underscores.
    """
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    if text in ("true", "false"):
        return text == "true"
    if "_" in text:
        return text
    if text.endswith(INTEGER_SUFFIX):
        try:
            return int(text[:-1])
        except ValueError:
            pass
    try:
        value = float(text)
    except ValueError:
        return text
    return value if math.isfinite(value) else text
