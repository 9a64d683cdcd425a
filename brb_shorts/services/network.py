from __future__ import annotations

import logging
import socket

LOGGER = logging.getLogger("brb_shorts.network")

UNKNOWN_LOCAL_IP = "YOUR_IP"
# Connecting a UDP socket only selects a route; nothing is sent.
_ROUTE_PROBE_ADDRESS = ("10.255.255.255", 1)


def get_local_ip() -> str:
    """Best guess at this machine's LAN IPv4 address, for OBS on another computer."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        probe.connect(_ROUTE_PROBE_ADDRESS)
        address = probe.getsockname()[0]
    except OSError:
        LOGGER.debug("network local_ip_probe_failed", exc_info=True)
        return UNKNOWN_LOCAL_IP
    finally:
        probe.close()

    if not isinstance(address, str) or address.startswith("127.") or address == "0.0.0.0":
        return UNKNOWN_LOCAL_IP
    return address
