"""
Configuration settings for arpingall.
"""

import shutil
import sys

# =============================================================================
# Routing Table Settings
# =============================================================================
ROUTE_TABLE_PATH = "/proc/net/route"

# Byte order the kernel uses when it prints addresses in the routing table.
# /proc/net/route dumps the raw 32-bit value in machine byte order.
HOST_BYTE_ORDER = sys.byteorder

# Minimum number of fields in a route row: Iface, Destination, Gateway
ROUTE_MIN_FIELDS = 3

DEFAULT_ROUTE = "0.0.0.0"

# =============================================================================
# ARP Announcement Settings
# =============================================================================
ARPING_BIN = shutil.which("arping") or "arping"

# Unsolicited ARP mode: update neighbours' caches
ARPING_MODE_FLAG = "-U"

# Probes sent per (interface, source, gateway)
ARPING_COUNT = 1

# =============================================================================
# Logging Settings
# =============================================================================
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Run Configuration
# =============================================================================

class ArpingConfig:
    """
    Configuration for a single announcement run.

    Values default to the module-level settings above; the command line
    overrides them.
    """

    def __init__(
        self,
        route_file: str = ROUTE_TABLE_PATH,
        arping_bin: str = ARPING_BIN,
        byte_order: str = HOST_BYTE_ORDER,
        count: int = ARPING_COUNT,
        dry_run: bool = False
    ):
        """
        Initialize run configuration.

        Args:
            route_file: Path to the kernel IPv4 routing table.
            arping_bin: arping executable to invoke.
            byte_order: Byte order of addresses in the routing table
                ('little' or 'big').
            count: Number of ARP packets per announcement.
            dry_run: Log the commands instead of running them.
        """
        if byte_order not in ("little", "big"):
            raise ValueError(f"Invalid byte order: {byte_order}")
        self.route_file = route_file
        self.arping_bin = arping_bin
        self.byte_order = byte_order
        self.count = count
        self.dry_run = dry_run

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            'route_file': self.route_file,
            'arping_bin': self.arping_bin,
            'byte_order': self.byte_order,
            'count': self.count,
            'dry_run': self.dry_run
        }
