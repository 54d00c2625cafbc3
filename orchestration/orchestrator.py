"""
arpingall Orchestrator

Refreshes neighbouring switches' ARP caches by sending one unsolicited ARP
for every local IPv4 address towards its interface's default gateway.

The run is a single linear pipeline:
1. Gateways - parse the kernel routing table into interface -> gateway
2. Addresses - enumerate local interfaces that have a hardware address
3. Dispatch - run arping for each (interface, source IP, gateway)

Errors from any stage propagate here; main() is the only place that turns
them into a process exit status.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config.settings import (
    ARPING_BIN,
    HOST_BYTE_ORDER,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_LEVEL,
    ROUTE_TABLE_PATH,
    ArpingConfig,
)
from core.announcer import AnnounceResult, ArpingAnnouncer, DryRunAnnouncer
from core.errors import ArpingAllError
from core.network_utils import local_addresses, print_interfaces
from core.route_table import load_default_gateways
from orchestration.dispatcher import ProbeDispatcher


logger = logging.getLogger(__name__)


class ArpingAllOrchestrator:
    """
    Runs the gateway -> address -> dispatch pipeline once.

    Usage:
        config = ArpingConfig(route_file="/proc/net/route")
        results = ArpingAllOrchestrator(config).run()
    """

    def __init__(self, config: ArpingConfig):
        self.config = config
        if config.dry_run:
            self.announcer = DryRunAnnouncer(config.arping_bin, config.count)
        else:
            self.announcer = ArpingAnnouncer(config.arping_bin, config.count)

    def run(self) -> List[AnnounceResult]:
        """
        Announce every eligible local address.

        Raises:
            ArpingAllError: A fatal condition stopped the run.
        """
        gateways = load_default_gateways(self.config.route_file, self.config.byte_order)
        if not gateways:
            logger.warning(f"No default routes found in {self.config.route_file}")

        addresses = local_addresses()
        dispatcher = ProbeDispatcher(gateways, self.announcer)
        results = dispatcher.dispatch(addresses)

        logger.info(f"Sent {len(results)} ARP announcement(s)")
        return results

    def list_interfaces(self):
        """Print the interfaces and gateways a run would use."""
        gateways = load_default_gateways(self.config.route_file, self.config.byte_order)
        print_interfaces(local_addresses(), gateways)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arpingall",
        description="Send an unsolicited ARP from every local IPv4 address to its default gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  arpingall
  arpingall --dry-run -v
  arpingall --route-file /tmp/route --arping /usr/sbin/arping
        """
    )

    parser.add_argument("--route-file", default=ROUTE_TABLE_PATH,
                       help=f"Kernel IPv4 routing table (default: {ROUTE_TABLE_PATH})")
    parser.add_argument("--arping", default=ARPING_BIN,
                       help="arping executable to run")
    parser.add_argument("--byte-order", choices=("little", "big"), default=HOST_BYTE_ORDER,
                       help=f"Byte order of routing table addresses (default: {HOST_BYTE_ORDER})")
    parser.add_argument("--dry-run", action="store_true",
                       help="Log the arping commands without running them")
    parser.add_argument("--list", action="store_true",
                       help="List interfaces and default gateways, then exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                       help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true",
                       help="Only log warnings and errors")
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, LOG_LEVEL)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    config = ArpingConfig(
        route_file=args.route_file,
        arping_bin=args.arping,
        byte_order=args.byte_order,
        dry_run=args.dry_run
    )
    orchestrator = ArpingAllOrchestrator(config)

    try:
        if args.list:
            orchestrator.list_interfaces()
        else:
            orchestrator.run()
    except ArpingAllError as e:
        logger.error(f"ERROR: {e}")
        output = getattr(e, 'output', "")
        if output:
            print(output, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
