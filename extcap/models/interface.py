"""Interface, link-type and version records reported to the front-end."""

from pydantic import BaseModel, ConfigDict

DEFAULT_VERSION = "0.0.1"
DEFAULT_HELP_URL = "https://www.wireshark.org/docs/man-pages/extcap.html"


class CaptureInterface(BaseModel):
    """A single capturable source returned by ``get_interfaces``."""

    model_config = ConfigDict(frozen=True)

    value: str  # passed back as --extcap-interface
    display: str  # shown in the front-end interface list

    def __str__(self) -> str:
        from extcap.serializer import render_interface

        return render_interface(self)


class DLT(BaseModel):
    """Link-layer type produced by a capture on one interface."""

    model_config = ConfigDict(frozen=True)

    number: int  # libpcap LINKTYPE_* value
    name: str
    display: str = ""

    def __str__(self) -> str:
        from extcap.serializer import render_dlt

        return render_dlt(self)


class VersionInfo(BaseModel):
    """Version preamble printed before the interface list."""

    model_config = ConfigDict(frozen=True)

    info: str = ""
    help: str = ""

    def with_defaults(self, info: str = DEFAULT_VERSION, help_url: str = DEFAULT_HELP_URL) -> "VersionInfo":
        """Return a copy with empty fields replaced by the given fallbacks."""
        return VersionInfo(info=self.info or info, help=self.help or help_url)

    def __str__(self) -> str:
        from extcap.serializer import render_version

        return render_version(self)
