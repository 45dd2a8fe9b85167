"""Build Wireshark extcap executables from a handful of backend callbacks.

The package handles the extcap command-line protocol (``--extcap-interfaces``,
``--extcap-dlts``, ``--extcap-config``, ``--capture``) and renders the
``interface``/``dlt``/``arg`` lines Wireshark parses. A backend only provides
the interface list, the link type, the configuration options and the capture
loop. See ``extcap.backends.scapy_dump`` for a complete example.
"""

from extcap.app import ExtcapApp
from extcap.errors import (
    ExtcapError,
    NoInterfaceSpecified,
    NoPipeProvided,
    OptionDefinitionError,
    SinkOpenError,
)
from extcap.models import (
    DLT,
    BooleanOption,
    BooleanOptionBuilder,
    CaptureInterface,
    ConfigOption,
    IntegerOption,
    IntegerOptionBuilder,
    StringOption,
    StringOptionBuilder,
    VersionInfo,
)

__version__ = "0.1.0"

__all__ = [
    "ExtcapApp",
    "ExtcapError",
    "NoInterfaceSpecified",
    "NoPipeProvided",
    "OptionDefinitionError",
    "SinkOpenError",
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
]
