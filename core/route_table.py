"""
Kernel IPv4 routing table parsing.

Reads the textual table the kernel exposes at /proc/net/route:

    Iface   Destination Gateway     Flags   RefCnt  Use  Metric  Mask ...
    eth0    00000000    0101A8C0    0003    0       0    0       00000000 ...
    eth0    0001A8C0    00000000    0001    0       0    0       00FFFFFF ...

Addresses are the raw 32-bit value printed as hex in the machine's byte
order, so on little-endian hosts 0101A8C0 is 192.168.1.1. The byte order is
a parameter rather than an assumption.
"""

import binascii
import ipaddress
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from config.settings import (
    DEFAULT_ROUTE,
    HOST_BYTE_ORDER,
    ROUTE_MIN_FIELDS,
    ROUTE_TABLE_PATH,
)
from core.errors import RouteTableError, UnsupportedAddressFamilyError


logger = logging.getLogger(__name__)

IPV4_LEN = 4


@dataclass
class RouteEntry:
    """One row of the routing table."""
    interface: str
    destination: ipaddress.IPv4Address
    gateway: ipaddress.IPv4Address


def parse_hex_address(field: str, byteorder: str = HOST_BYTE_ORDER) -> ipaddress.IPv4Address:
    """
    Decode a routing table address field.

    Args:
        field: Hex string as printed by the kernel (e.g. '0101A8C0').
        byteorder: 'little' if the field is in little-endian order and must
            be reversed to network order, 'big' if it already is.

    Returns:
        The IPv4 address.

    Raises:
        RouteTableError: The field is not valid hex.
        UnsupportedAddressFamilyError: The field is not exactly 4 bytes.
    """
    try:
        raw = binascii.unhexlify(field)
    except (binascii.Error, ValueError) as e:
        raise RouteTableError(f"invalid address field {field!r}: {e}") from e

    if len(raw) != IPV4_LEN:
        raise UnsupportedAddressFamilyError(field)

    if byteorder == "little":
        raw = raw[::-1]
    return ipaddress.IPv4Address(raw)


def format_hex_address(address: ipaddress.IPv4Address, byteorder: str = HOST_BYTE_ORDER) -> str:
    """Encode an address the way the kernel prints it in the routing table."""
    raw = ipaddress.IPv4Address(address).packed
    if byteorder == "little":
        raw = raw[::-1]
    return raw.hex().upper()


def parse_routes(lines: Iterable[str], byteorder: str = HOST_BYTE_ORDER) -> List[RouteEntry]:
    """
    Parse routing table text into route entries.

    The first line is a header and is skipped. Parsing is all-or-nothing:
    any malformed row fails the whole table.

    Args:
        lines: Lines of the routing table, header included.
        byteorder: Byte order of the address fields.

    Returns:
        Route entries in table order, duplicates preserved.
    """
    routes = []

    for line_num, line in enumerate(lines, 1):
        if line_num == 1:
            continue  # header

        fields = line.split()
        if len(fields) < ROUTE_MIN_FIELDS:
            raise RouteTableError(
                f"wrong number of fields on line {line_num} "
                f"(expected at least {ROUTE_MIN_FIELDS}, got {len(fields)}): {line.rstrip()!r}"
            )

        routes.append(RouteEntry(
            interface=fields[0],
            destination=parse_hex_address(fields[1], byteorder),
            gateway=parse_hex_address(fields[2], byteorder),
        ))

    return routes


def read_routes(path: str = ROUTE_TABLE_PATH, byteorder: str = HOST_BYTE_ORDER) -> List[RouteEntry]:
    """
    Read and parse the routing table file.

    Args:
        path: Routing table location.
        byteorder: Byte order of the address fields.

    Returns:
        Route entries in file order.

    Raises:
        RouteTableError: The file cannot be opened or is malformed.
    """
    try:
        with open(path, "r") as f:
            lines = f.read().splitlines()
    except OSError as e:
        logger.error(f"Can't open route file {path}: {e}")
        raise RouteTableError(f"can't open route file {path}: {e}") from e

    routes = parse_routes(lines, byteorder)
    logger.debug(f"Read {len(routes)} routes from {path}")
    return routes


def default_gateways(routes: Iterable[RouteEntry]) -> Dict[str, ipaddress.IPv4Address]:
    """
    Build the interface -> default gateway index.

    Only routes whose destination is 0.0.0.0 are kept. When an interface
    has several default routes the last one wins.

    Args:
        routes: Parsed route entries.

    Returns:
        Mapping from interface name to gateway address.
    """
    default = ipaddress.IPv4Address(DEFAULT_ROUTE)
    gateways: Dict[str, ipaddress.IPv4Address] = {}

    for route in routes:
        if route.destination != default:
            continue
        previous = gateways.get(route.interface)
        if previous is not None and previous != route.gateway:
            logger.debug(
                f"Multiple default routes on {route.interface}: "
                f"{previous} replaced by {route.gateway}"
            )
        gateways[route.interface] = route.gateway

    return gateways


def load_default_gateways(path: str = ROUTE_TABLE_PATH,
                          byteorder: str = HOST_BYTE_ORDER) -> Dict[str, ipaddress.IPv4Address]:
    """Read the routing table and return its default gateway index."""
    gateways = default_gateways(read_routes(path, byteorder))
    for iface, gateway in gateways.items():
        logger.debug(f"Default gateway for {iface}: {gateway}")
    return gateways
