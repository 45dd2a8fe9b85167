"""extcapdump — sample extcap backend that captures with Scapy.

Lists the interfaces Scapy knows about, reports their link type and streams
captured packets to Wireshark as a pcap file over the FIFO.

Install the package and copy (or symlink) the ``extcapdump`` script into
Wireshark's personal extcap folder, then restart Wireshark. Live capture
needs root or CAP_NET_RAW.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from scapy.all import PcapWriter, conf, sniff

from extcap.app import ExtcapApp
from extcap.models.interface import DLT, CaptureInterface
from extcap.models.options import IntegerOptionBuilder, OptionBase

logger = logging.getLogger(__name__)

DEFAULT_SNAPLEN = 65535
MAX_SNAPLEN = 262144

SNAP_LENGTH = (
    IntegerOptionBuilder("snap-len", "Packet snapshot length")
    .range(1, MAX_SNAPLEN)
    .default(DEFAULT_SNAPLEN)
    .tooltip("Maximum number of bytes captured per packet")
    .build()
)


def get_interfaces() -> list[CaptureInterface]:
    """List interfaces known to Scapy."""
    interfaces = []
    for iface_name, iface_data in conf.ifaces.items():
        description = getattr(iface_data, "description", "") or str(iface_name)
        interfaces.append(
            CaptureInterface(value=str(iface_name), display=f"extcapdump: {description}")
        )
    return interfaces


def get_dlt(iface: str) -> DLT:
    """Report the link type of ``iface`` by opening a layer-2 listen socket on it.

    Raises:
        PermissionError: If insufficient privileges to open the socket.
        ValueError: If Scapy has no link type number for the interface's layer.
    """
    sock = conf.L2listen(iface=iface)
    try:
        layer = sock.LL
    finally:
        sock.close()

    number = conf.l2types.layer2num.get(layer)
    if number is None:
        raise ValueError(f"Unable to get DLT for interface '{iface}': unknown layer {layer.__name__}")

    return DLT(number=number, name=layer.__name__, display=f"{layer.__name__} on {iface}")


def get_config_options(iface: str) -> list[OptionBase]:
    return [SNAP_LENGTH]


def get_all_config_options() -> list[OptionBase]:
    return [SNAP_LENGTH]


def start_capture(iface: str, sink: BinaryIO, capture_filter: str, opts: dict[str, Any]) -> None:
    """Sniff ``iface`` and write every packet to ``sink`` in pcap format.

    Packets longer than the snap length are cut to ``snaplen`` bytes; the
    record keeps the original length as ``wirelen``. Runs until the
    front-end closes the FIFO or the sniffer fails. The sink itself is
    closed by the caller.
    """
    snaplen = opts.get("snap-len", DEFAULT_SNAPLEN)
    dlt = get_dlt(iface)

    writer = PcapWriter(sink, linktype=dlt.number, snaplen=snaplen, sync=True)
    logger.info("Sniffing %s (linktype %d, snaplen %d)", iface, dlt.number, snaplen)

    def write_truncated(pkt) -> None:
        raw = bytes(pkt)
        timestamp = float(pkt.time)
        sec = int(timestamp)
        usec = int(round((timestamp - sec) * 1000000))
        writer.write_packet(raw[:snaplen], sec=sec, usec=usec, wirelen=len(raw))

    try:
        # raw bytes carry no link type, so the header goes out up front
        writer.write_header(None)
        sniff(
            iface=iface,
            filter=capture_filter or None,
            prn=write_truncated,
            store=False,  # packets go straight to the pipe
        )
    except BrokenPipeError:
        logger.info("Front-end closed the pipe, stopping capture on %s", iface)


def build_app() -> ExtcapApp:
    """Assemble the extcapdump application."""
    return ExtcapApp(
        get_interfaces=get_interfaces,
        get_dlt=get_dlt,
        start_capture=start_capture,
        get_config_options=get_config_options,
        get_all_config_options=get_all_config_options,
        usage="sample extcap application",
        help_page="Sample application showing how to use the 'extcap' package. Uses Scapy for capturing.",
        usage_examples=[
            "--extcap-interface=eth0 --extcap-dlts",
            "--extcap-interface=eth0 --extcap-config",
            "--extcap-interface=eth0 --snap-len 1500 --fifo=FILENAME --capture",
        ],
    )


def main() -> None:
    """Console script entry point."""
    build_app().run()


if __name__ == "__main__":
    main()
