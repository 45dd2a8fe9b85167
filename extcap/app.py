"""Extcap application — turns four backend callbacks into a Wireshark extcap executable.

Wireshark drives an extcap executable through a fixed set of flags::

    mydump --extcap-interfaces
    mydump --extcap-interface=eth0 --extcap-dlts
    mydump --extcap-interface=eth0 --extcap-config
    mydump --extcap-interface=eth0 --fifo=/tmp/pipe --capture [--extcap-capture-filter=...] [option flags]

A backend supplies the callbacks and hands control to ``ExtcapApp.run``::

    app = ExtcapApp(
        get_interfaces=get_interfaces,
        get_dlt=get_dlt,
        start_capture=start_capture,
        get_config_options=get_config_options,       # optional
        get_all_config_options=get_all_config_options,  # optional
    )
    app.run()

Exactly one action runs per invocation. Listing actions write protocol lines
to stdout; logging goes to stderr (or ``--debug-file``) so it never mixes with
the protocol output.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO

from extcap.errors import NoInterfaceSpecified, NoPipeProvided, SinkOpenError
from extcap.models.interface import DLT, CaptureInterface, VersionInfo
from extcap.models.options import (
    BooleanOption,
    IntegerOption,
    OptionBase,
    StringOption,
    number_options,
)
from extcap.serializer import render_dlt, render_interface, render_option, render_version
from extcap.settings import ExtcapSettings, load_settings, settings_path_from_env

logger = logging.getLogger(__name__)

# Flags consumed by the router itself and never forwarded to start_capture
RESERVED_FLAGS = frozenset({"extcap-interface", "fifo", "extcap-capture-filter"})

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Callback signatures a backend provides
GetInterfaces = Callable[[], Sequence[CaptureInterface]]
GetDLT = Callable[[str], DLT]
GetConfigOptions = Callable[[str], Sequence[OptionBase]]
GetAllConfigOptions = Callable[[], Sequence[OptionBase]]
StartCapture = Callable[[str, BinaryIO, str, dict[str, Any]], None]
OpenPipe = Callable[[str], BinaryIO]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def open_fifo(path: str) -> BinaryIO:
    """Open an existing named pipe (or file) for write-only binary access.

    Blocks until the front-end opens the read end of the pipe. The file is
    neither created nor truncated.
    """
    fd = os.open(path, os.O_WRONLY)
    return os.fdopen(fd, "wb")


def capture_options(flags: dict[str, Any]) -> dict[str, Any]:
    """Build the options handed to ``start_capture`` from the parsed flags.

    Every flag that was set is included, except the reserved protocol flags.
    """
    return {name: value for name, value in flags.items() if name not in RESERVED_FLAGS}


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging to stderr, or to ``log_file`` when given."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        filename=log_file,
    )


def _add_option_flag(group: argparse._ArgumentGroup, opt: OptionBase) -> None:
    """Register the command-line flag through which Wireshark passes ``opt``."""
    flag = f"--{opt.call}"
    help_text = opt.display.replace("%", "%%")

    if isinstance(opt, IntegerOption):
        group.add_argument(flag, dest=opt.call, type=int, metavar="N", help=help_text)
    elif isinstance(opt, StringOption):
        group.add_argument(flag, dest=opt.call, metavar="VALUE", help=help_text)
    elif isinstance(opt, BooleanOption):
        group.add_argument(flag, dest=opt.call, action="store_true", help=help_text)
    else:
        raise TypeError(f"Unknown config option type: {type(opt).__name__}")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


@dataclass
class ExtcapApp:
    """An extcap executable assembled from backend callbacks.

    Args:
        get_interfaces: Returns the capturable interfaces.
        get_dlt: Returns the link-layer type for an interface.
        start_capture: Runs the capture, writing packets to the sink.
            Called as ``start_capture(iface, sink, capture_filter, opts)``.
        get_config_options: Returns the options for an interface. When
            omitted, ``--extcap-config`` prints nothing.
        get_all_config_options: Returns every option any interface can take,
            used to register one flag per option before parsing.
        open_pipe: Replaces the default FIFO opener.
        usage: One-line description shown in help output.
        help_page: Longer description shown after the option list.
        version: Version preamble; empty fields fall back to the settings
            file, then to the built-in defaults.
        usage_examples: Extra example invocations (without the program name)
            appended after ``--extcap-interfaces`` in the help usage section.
        prog: Program name for help output (defaults to ``argv[0]``).
        settings_path: TOML settings file (defaults to ``$EXTCAP_SETTINGS``).
    """

    get_interfaces: GetInterfaces
    get_dlt: GetDLT
    start_capture: StartCapture
    get_config_options: GetConfigOptions | None = None
    get_all_config_options: GetAllConfigOptions | None = None
    open_pipe: OpenPipe | None = None
    usage: str = ""
    help_page: str = ""
    version: VersionInfo = field(default_factory=VersionInfo)
    usage_examples: list[str] = field(default_factory=list)
    prog: str | None = None
    settings_path: str | Path | None = None

    # -- startup -------------------------------------------------------------

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser: protocol flags plus one flag per backend option.

        Unset flags are absent from the parsed namespace, so the router can
        tell "not given" apart from "given with an empty value".
        """
        prog = self.prog or os.path.basename(sys.argv[0]) or "extcap"
        examples = ["--extcap-interfaces", *self.usage_examples]

        parser = argparse.ArgumentParser(
            prog=prog,
            usage="\n       ".join(f"%(prog)s {example}" for example in examples),
            description=self.usage or None,
            epilog=self.help_page or None,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            argument_default=argparse.SUPPRESS,
            allow_abbrev=False,
        )

        protocol = parser.add_argument_group("extcap")
        protocol.add_argument(
            "--extcap-interfaces",
            dest="extcap-interfaces",
            action="store_true",
            help="list the extcap interfaces",
        )
        protocol.add_argument(
            "--extcap-dlts",
            dest="extcap-dlts",
            action="store_true",
            help="list the DLTs",
        )
        protocol.add_argument(
            "--extcap-interface",
            dest="extcap-interface",
            metavar="IFACE",
            help="specify the extcap interface",
        )
        protocol.add_argument(
            "--extcap-config",
            dest="extcap-config",
            action="store_true",
            help="list the additional configuration for an interface",
        )
        protocol.add_argument(
            "--capture",
            dest="capture",
            action="store_true",
            help="run the capture",
        )
        protocol.add_argument(
            "--extcap-capture-filter",
            dest="extcap-capture-filter",
            metavar="CFILTER",
            help="the capture filter",
        )
        protocol.add_argument(
            "--fifo",
            dest="fifo",
            metavar="FIFO",
            help="dump data to file or fifo",
        )
        protocol.add_argument(
            "--extcap-version",
            dest="extcap-version",
            metavar="VERSION",
            help="version of the calling front-end",
        )
        protocol.add_argument(
            "--debug",
            dest="debug",
            action="store_true",
            help="enable debug logging",
        )
        protocol.add_argument(
            "--debug-file",
            dest="debug-file",
            metavar="FILE",
            help="write log messages to FILE instead of stderr",
        )

        if self.get_all_config_options is not None:
            options = parser.add_argument_group("capture options")
            for opt in self.get_all_config_options():
                _add_option_flag(options, opt)

        return parser

    def resolve_version(self, settings: ExtcapSettings) -> VersionInfo:
        """Fill empty version fields from the settings (which carry the built-in defaults)."""
        return self.version.with_defaults(settings.version, settings.help_url)

    # -- actions -------------------------------------------------------------

    def list_interfaces(self, version: VersionInfo) -> None:
        """Print the version preamble followed by one line per interface."""
        ifaces = self.get_interfaces()
        lines = [render_version(version)]
        lines.extend(render_interface(iface) for iface in ifaces)
        print("\n".join(lines))
        logger.debug("Listed %d interface(s)", len(ifaces))

    def list_dlts(self, flags: dict[str, Any]) -> None:
        """Print the link-layer type of the selected interface."""
        if "extcap-interface" not in flags:
            raise NoInterfaceSpecified()

        dlt = self.get_dlt(flags["extcap-interface"])
        print(render_dlt(dlt))

    def list_config_options(self, flags: dict[str, Any]) -> None:
        """Print the numbered configuration options of the selected interface."""
        if self.get_config_options is None:
            logger.debug("Backend has no configuration options")
            return

        if "extcap-interface" not in flags:
            raise NoInterfaceSpecified()

        options = number_options(self.get_config_options(flags["extcap-interface"]))
        if options:
            print("\n".join(render_option(opt) for opt in options))

    def capture(self, flags: dict[str, Any]) -> None:
        """Open the FIFO and run the backend capture on the selected interface.

        Raises:
            NoInterfaceSpecified: If ``--extcap-interface`` is missing.
            NoPipeProvided: If ``--fifo`` is missing.
            SinkOpenError: If the FIFO cannot be opened.
        """
        if "extcap-interface" not in flags:
            raise NoInterfaceSpecified()
        if "fifo" not in flags:
            raise NoPipeProvided()

        iface = flags["extcap-interface"]
        fifo = flags["fifo"]
        capture_filter = flags.get("extcap-capture-filter", "")
        opts = capture_options(flags)

        sink = self._open_sink(fifo)
        logger.info("Capture started on %s -> %s (filter: %r)", iface, fifo, capture_filter)
        try:
            self.start_capture(iface, sink, capture_filter, opts)
        finally:
            self._close_sink(sink)
        logger.info("Capture on %s finished", iface)

    def _close_sink(self, sink: BinaryIO) -> None:
        # close() still releases the descriptor when its final flush fails
        try:
            sink.close()
        except BrokenPipeError:
            logger.info("Front-end closed the pipe, unflushed capture data dropped")

    def _open_sink(self, path: str) -> BinaryIO:
        opener = self.open_pipe or open_fifo
        try:
            return opener(path)
        except OSError as exc:
            raise SinkOpenError(f"Unable to open pipe: {exc}") from exc

    # -- routing -------------------------------------------------------------

    def dispatch(
        self,
        flags: dict[str, Any],
        version: VersionInfo,
        parser: argparse.ArgumentParser,
    ) -> None:
        """Run the first action whose flag is set; print help when none is.

        Priority: --extcap-interfaces, --extcap-dlts, --extcap-config, --capture.
        """
        if "extcap-interfaces" in flags:
            self.list_interfaces(version)
        elif "extcap-dlts" in flags:
            self.list_dlts(flags)
        elif "extcap-config" in flags:
            self.list_config_options(flags)
        elif "capture" in flags:
            self.capture(flags)
        else:
            parser.print_help()

    # -- entry point ---------------------------------------------------------

    def main(self, argv: Sequence[str] | None = None) -> int:
        """Parse ``argv``, run one action and return the process exit status."""
        parser = self.build_parser()
        flags = vars(parser.parse_args(argv))

        settings = load_settings(self.settings_path or settings_path_from_env())
        setup_logging(
            "DEBUG" if flags.get("debug") else settings.log_level,
            flags.get("debug-file"),
        )
        if "extcap-version" in flags:
            logger.debug("Front-end extcap version: %s", flags["extcap-version"])

        version = self.resolve_version(settings)

        try:
            self.dispatch(flags, version, parser)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
            return 0
        except Exception as e:
            logger.debug("Action failed", exc_info=True)
            print(e, file=sys.stderr)
            return 1

        return 0

    def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the application and exit the process with its status."""
        sys.exit(self.main(argv))
