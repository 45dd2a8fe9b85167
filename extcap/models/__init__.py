"""Pydantic models for everything the extcap protocol reports to the front-end."""

from extcap.models.interface import DLT, CaptureInterface, VersionInfo
from extcap.models.options import (
    BooleanOption,
    BooleanOptionBuilder,
    ConfigOption,
    IntegerOption,
    IntegerOptionBuilder,
    StringOption,
    StringOptionBuilder,
    number_options,
)

__all__ = [
    "CaptureInterface",
    "DLT",
    "VersionInfo",
    "ConfigOption",
    "IntegerOption",
    "StringOption",
    "BooleanOption",
    "IntegerOptionBuilder",
    "StringOptionBuilder",
    "BooleanOptionBuilder",
    "number_options",
]
