"""
Core module for arpingall.

Includes:
- Routing table parsing and the default gateway index
- Local interface and address enumeration
- ARP announcement senders
"""

from .errors import (
    ArpingAllError,
    RouteTableError,
    UnsupportedAddressFamilyError,
    InterfaceEnumerationError,
    AnnounceError,
)
from .route_table import (
    RouteEntry,
    parse_hex_address,
    format_hex_address,
    parse_routes,
    read_routes,
    default_gateways,
    load_default_gateways,
)
from .network_utils import LocalAddress, local_addresses
from .announcer import (
    ProbeTarget,
    AnnounceResult,
    Announcer,
    ArpingAnnouncer,
    DryRunAnnouncer,
)
