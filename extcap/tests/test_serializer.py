"""Tests for the extcap line renderer (extcap.serializer)."""

from __future__ import annotations

import pytest

from extcap.models.interface import DLT, CaptureInterface, VersionInfo
from extcap.models.options import (
    BooleanOption,
    BooleanOptionBuilder,
    IntegerOption,
    IntegerOptionBuilder,
    OptionBase,
    StringOptionBuilder,
)
from extcap.serializer import render, render_option

IPV4_PATTERN = (
    r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"
)


# ===========================================================================
# Group 1: Records
# ===========================================================================


class TestRecords:
    """interface / dlt / extcap lines."""

    def test_interface(self) -> None:
        iface = CaptureInterface(value="example1", display="Example interface 1 for extcap")
        assert render(iface) == "interface {value=example1}{display=Example interface 1 for extcap}"

    def test_dlt(self) -> None:
        dlt = DLT(number=147, name="USER1", display="Demo Implementation for Extcap")
        assert render(dlt) == "dlt {number=147}{name=USER1}{display=Demo Implementation for Extcap}"

    def test_dlt_empty_display(self) -> None:
        assert render(DLT(number=1, name="EN10MB")) == "dlt {number=1}{name=EN10MB}{display=}"

    def test_version(self) -> None:
        version = VersionInfo(info="1.2.0", help="https://example.org")
        assert render(version) == "extcap {version=1.2.0}{help=https://example.org}"

    def test_str_matches_render(self) -> None:
        iface = CaptureInterface(value="eth0", display="Ethernet")
        assert str(iface) == render(iface)
        assert str(DLT(number=1, name="EN10MB")) == "dlt {number=1}{name=EN10MB}{display=}"


# ===========================================================================
# Group 2: Options
# ===========================================================================


class TestOptionLines:
    """arg lines for every option kind."""

    def test_integer_option(self) -> None:
        opt = (
            IntegerOptionBuilder("delay", "Time delay")
            .range(1, 15)
            .required(True)
            .tooltip("Time delay between packages")
            .build()
        )
        assert render_option(opt) == (
            "arg {number=0}{call=--delay}{display=Time delay}{type=integer}"
            "{tooltip=Time delay between packages}{required=true}{range=1,15}"
        )

    def test_integer_default(self) -> None:
        opt = IntegerOptionBuilder("snap-len", "Snap length").range(1, 65535).default(1500).build()
        assert render_option(opt) == (
            "arg {number=0}{call=--snap-len}{display=Snap length}{type=integer}"
            "{range=1,65535}{default=1500}"
        )

    def test_integer_negative_range(self) -> None:
        opt = IntegerOption(call="offset", display="Offset", range=(-10, 10), default=-3)
        assert render_option(opt).endswith("{range=-10,10}{default=-3}")

    def test_string_validation(self) -> None:
        opt = StringOptionBuilder("server", "IP address for log server").validation(IPV4_PATTERN).build()
        assert render_option(opt) == (
            "arg {number=0}{call=--server}{display=IP address for log server}{type=string}"
            "{validation=" + IPV4_PATTERN + "}"
        )

    def test_string_placeholder(self) -> None:
        opt = (
            StringOptionBuilder("message", "Message")
            .tooltip("Package message content")
            .placeholder("Please enter a message here ...")
            .build()
        )
        assert render_option(opt) == (
            "arg {number=0}{call=--message}{display=Message}{type=string}"
            "{tooltip=Package message content}{placeholder=Please enter a message here ...}"
        )

    def test_string_default_not_rendered(self) -> None:
        opt = StringOptionBuilder("user", "User").default("root").build()
        assert render_option(opt) == "arg {number=0}{call=--user}{display=User}{type=string}"

    def test_boolean_without_default(self) -> None:
        opt = BooleanOptionBuilder("verify", "Verify").tooltip("Verify package content").build()
        assert render_option(opt) == (
            "arg {number=0}{call=--verify}{display=Verify}{type=boolflag}"
            "{tooltip=Verify package content}"
        )

    @pytest.mark.parametrize("value, text", [(True, "true"), (False, "false")])
    def test_boolean_default(self, value: bool, text: str) -> None:
        opt = BooleanOption(call="verify", display="Verify", default=value)
        assert render_option(opt).endswith("{type=boolflag}{default=" + text + "}")

    def test_attribute_order(self) -> None:
        opt = (
            IntegerOptionBuilder("port", "Port")
            .default(22)
            .group("Server")
            .range(1, 65535)
            .required()
            .tooltip("SSH port")
            .build()
            .with_number(3)
        )
        assert render_option(opt) == (
            "arg {number=3}{call=--port}{display=Port}{type=integer}"
            "{tooltip=SSH port}{required=true}{group=Server}{range=1,65535}{default=22}"
        )

    def test_required_false_omitted(self) -> None:
        opt = BooleanOptionBuilder("verify", "Verify").required(False).build()
        assert "{required" not in render_option(opt)

    def test_braces_not_escaped(self) -> None:
        opt = StringOptionBuilder("name", "Name {x}").validation(r"^a{2,3}$").build()
        line = render_option(opt)
        assert "{display=Name {x}}" in line
        assert line.endswith("{validation=^a{2,3}$}")

    def test_unknown_kind_is_fatal(self) -> None:
        class SelectorOption(OptionBase):
            pass

        with pytest.raises(TypeError, match="Unknown config option type"):
            render_option(SelectorOption(call="remote", display="Remote Channel"))
