"""
Exceptions raised by the arpingall pipeline.

Core code raises these and never exits the process; the orchestrator's
entry point maps them to an exit status.
"""


class ArpingAllError(Exception):
    """Base class for all arpingall errors."""


class RouteTableError(ArpingAllError):
    """The routing table could not be read or is malformed."""


class UnsupportedAddressFamilyError(RouteTableError):
    """A routing table address did not decode to 4 bytes."""

    def __init__(self, field: str):
        super().__init__(f"only IPv4 is supported (got {field!r})")
        self.field = field


class InterfaceEnumerationError(ArpingAllError):
    """The list of network interfaces could not be obtained."""


class AnnounceError(ArpingAllError):
    """An ARP announcement could not be sent."""

    def __init__(self, message: str, command=None, returncode=None, output: str = ""):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.output = output
