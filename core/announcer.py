"""
ARP announcement senders.

An Announcer takes one probe target and refreshes the neighbours' view of
(source MAC, source IP) on that interface. The default implementation runs
the iputils `arping` tool in unsolicited mode:

    arping -U -c 1 -I eth0 -s 69.162.98.2 69.162.98.1

which broadcasts "Who has 69.162.98.1? Tell 69.162.98.2" from eth0's MAC.
Every host and switch on the segment sees the request and learns that MAC
and IP go together.
"""

import ipaddress
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from config.settings import ARPING_BIN, ARPING_COUNT, ARPING_MODE_FLAG
from core.errors import AnnounceError


logger = logging.getLogger(__name__)


@dataclass
class ProbeTarget:
    """An (interface, source IP, gateway IP) triple to announce."""
    interface: str
    source: ipaddress.IPv4Address
    gateway: ipaddress.IPv4Address


@dataclass
class AnnounceResult:
    """Outcome of one announcement."""
    target: ProbeTarget
    command: List[str] = field(default_factory=list)
    output: str = ""
    returncode: int = 0


class Announcer(ABC):
    @abstractmethod
    def announce(self, target: ProbeTarget) -> AnnounceResult:
        """Send one announcement for target, raising AnnounceError on failure."""
        raise NotImplementedError


class ArpingAnnouncer(Announcer):
    """
    Sends announcements by running the `arping` binary.

    Output is captured with stderr merged into stdout. A non-zero exit code
    is a failure.
    """

    def __init__(self, arping_bin: str = ARPING_BIN, count: int = ARPING_COUNT):
        self.arping_bin = arping_bin
        self.count = count

    def build_command(self, target: ProbeTarget) -> List[str]:
        """Build the arping argument vector for target."""
        return [
            self.arping_bin,
            ARPING_MODE_FLAG,
            "-c", str(self.count),
            "-I", target.interface,
            "-s", str(target.source),
            str(target.gateway),
        ]

    def _run_command(self, cmd: List[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False
            )
        except OSError as e:
            raise AnnounceError(f"can't run {cmd[0]}: {e}", command=cmd) from e

    def announce(self, target: ProbeTarget) -> AnnounceResult:
        cmd = self.build_command(target)
        logger.info(f"Executing: {' '.join(cmd)}")
        proc = self._run_command(cmd)
        if proc.returncode != 0:
            raise AnnounceError(
                f"{' '.join(cmd)} exited with status {proc.returncode}",
                command=cmd,
                returncode=proc.returncode,
                output=proc.stdout or ""
            )
        return AnnounceResult(
            target=target,
            command=cmd,
            output=proc.stdout or "",
            returncode=proc.returncode
        )


class DryRunAnnouncer(ArpingAnnouncer):
    """Builds the arping command but only logs it."""

    def announce(self, target: ProbeTarget) -> AnnounceResult:
        cmd = self.build_command(target)
        logger.info(f"Dry run, not executing: {' '.join(cmd)}")
        return AnnounceResult(target=target, command=cmd)
