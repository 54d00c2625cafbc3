"""
Network utilities for interface enumeration.
"""

import ipaddress
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import netifaces

from core.errors import InterfaceEnumerationError


logger = logging.getLogger(__name__)

# netifaces reports loopback and some virtual links with this address
NULL_MAC = "00:00:00:00:00:00"


@dataclass
class LocalAddress:
    """One address assigned to a local interface."""
    interface: str
    mac: str
    address: str  # "<ip>/<prefixlen>"

    @property
    def ip(self) -> str:
        return self.address.split('/', 1)[0]


def _hardware_address(addrs: Dict[int, List[dict]]) -> str:
    """Return the interface's link-layer address, or '' if it has none."""
    links = addrs.get(netifaces.AF_LINK) or []
    if not links:
        return ""
    mac = (links[0].get('addr') or "").lower()
    if mac == NULL_MAC:
        return ""
    return mac


def _ipv4_with_prefix(entry: dict) -> Optional[str]:
    addr = entry.get('addr')
    if not addr:
        return None
    netmask = entry.get('netmask')
    if not netmask:
        return f"{addr}/32"
    prefixlen = ipaddress.IPv4Network(f"0.0.0.0/{netmask}").prefixlen
    return f"{addr}/{prefixlen}"


def _ipv6_with_prefix(entry: dict) -> Optional[str]:
    addr = entry.get('addr')
    if not addr:
        return None
    addr = addr.split('%', 1)[0]
    netmask = entry.get('netmask') or ""
    if '/' in netmask:
        prefixlen = int(netmask.rsplit('/', 1)[1])
    elif netmask:
        prefixlen = bin(int(ipaddress.IPv6Address(netmask))).count("1")
    else:
        prefixlen = 128
    return f"{addr}/{prefixlen}"


def interface_addresses(name: str, addrs: Dict[int, List[dict]]) -> List[LocalAddress]:
    """
    Flatten one interface's netifaces address table.

    Args:
        name: Interface name.
        addrs: Result of netifaces.ifaddresses(name).

    Returns:
        One LocalAddress per assigned address, IPv4 first, or an empty list
        if the interface has no hardware address.
    """
    mac = _hardware_address(addrs)
    if not mac:
        logger.debug(f"Skipping interface without hardware address: {name}")
        return []

    result = []
    for family, formatter in ((netifaces.AF_INET, _ipv4_with_prefix),
                              (netifaces.AF_INET6, _ipv6_with_prefix)):
        for entry in addrs.get(family, []):
            address = formatter(entry)
            if address:
                result.append(LocalAddress(interface=name, mac=mac, address=address))
    return result


def local_addresses() -> List[LocalAddress]:
    """
    Get every address assigned to an interface that has a hardware address.

    Returns:
        LocalAddress records in interface enumeration order.

    Raises:
        InterfaceEnumerationError: The interface list could not be read.
    """
    try:
        names = netifaces.interfaces()
    except (OSError, ValueError) as e:
        raise InterfaceEnumerationError(f"can't list interfaces: {e}") from e

    result = []
    for name in names:
        try:
            addrs = netifaces.ifaddresses(name)
        except (OSError, ValueError) as e:
            logger.warning(f"Can't get addresses of interface {name}: {e}")
            continue
        result.extend(interface_addresses(name, addrs))

    return result


def print_interfaces(addresses: List[LocalAddress],
                     gateways: Optional[Dict[str, ipaddress.IPv4Address]] = None):
    """Print interfaces, their addresses and default gateways."""
    gateways = gateways or {}

    print("\nAvailable Network Interfaces:")
    print("-" * 70)

    current = None
    index = 0
    for local in addresses:
        if local.interface != current:
            current = local.interface
            index += 1
            print(f"{index}. {local.interface}")
            print(f"   MAC: {local.mac}")
            gateway = gateways.get(local.interface)
            if gateway is not None:
                print(f"   Gateway: {gateway}")
        print(f"   IP: {local.address}")
    print()
