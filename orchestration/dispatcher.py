"""
Probe dispatch: correlates local addresses with default gateways and hands
each eligible (interface, source, gateway) triple to an announcer.
"""

import ipaddress
import logging
import sys
from typing import Dict, Iterable, Iterator, List, Optional, TextIO

from core.announcer import Announcer, AnnounceResult, ProbeTarget
from core.network_utils import LocalAddress


logger = logging.getLogger(__name__)


class ProbeDispatcher:
    """
    Announces every local IPv4 address on the interface's default gateway.

    Usage:
        dispatcher = ProbeDispatcher(load_default_gateways(), ArpingAnnouncer())
        dispatcher.dispatch(local_addresses())
    """

    def __init__(self, gateways: Dict[str, ipaddress.IPv4Address],
                 announcer: Announcer, output: Optional[TextIO] = None):
        """
        Args:
            gateways: Interface -> default gateway index.
            announcer: Sender used for each target.
            output: Stream the tool output is echoed to (stdout if None).
        """
        self.gateways = gateways
        self.announcer = announcer
        self.output = output

    def targets(self, addresses: Iterable[LocalAddress]) -> Iterator[ProbeTarget]:
        """Yield probe targets, skipping addresses that cannot be announced."""
        for local in addresses:
            try:
                ip = ipaddress.ip_interface(local.address).ip
            except ValueError:
                ip = None
            if not isinstance(ip, ipaddress.IPv4Address):
                logger.info(f"Skipping non-IPv4 address: {local.address}")
                continue

            gateway = self.gateways.get(local.interface)
            if gateway is None:
                logger.info(
                    f"Skipping IP because couldn't find default gateway for its "
                    f"interface: {local.address} (iface: {local.interface})"
                )
                continue

            yield ProbeTarget(interface=local.interface, source=ip, gateway=gateway)

    def dispatch(self, addresses: Iterable[LocalAddress]) -> List[AnnounceResult]:
        """
        Announce every eligible address, one at a time.

        Args:
            addresses: Local addresses in enumeration order.

        Returns:
            Results of the announcements made.

        Raises:
            AnnounceError: An announcement failed; later targets are not tried.
        """
        results = []
        for target in self.targets(addresses):
            logger.debug(f"Announcing {target.source} on {target.interface} to {target.gateway}")
            result = self.announcer.announce(target)
            if result.output:
                print(result.output, file=self.output or sys.stdout)
            results.append(result)
        return results
