# tests/test_dispatcher.py
import io
import ipaddress

import pytest

from core.announcer import Announcer, AnnounceResult, ArpingAnnouncer, ProbeTarget
from core.errors import AnnounceError
from core.network_utils import LocalAddress
from orchestration.dispatcher import ProbeDispatcher


class RecordingAnnouncer(Announcer):
    """Records targets instead of sending anything."""

    def __init__(self, fail_on=None):
        self.targets = []
        self.fail_on = fail_on

    def announce(self, target: ProbeTarget) -> AnnounceResult:
        self.targets.append(target)
        if self.fail_on and str(target.source) == self.fail_on:
            raise AnnounceError("arping exited with status 1", returncode=1)
        return AnnounceResult(target=target, output=f"sent from {target.source}")


GATEWAYS = {"eth0": ipaddress.IPv4Address("10.0.0.1")}


def test_dispatch_announces_to_gateway():
    announcer = RecordingAnnouncer()
    out = io.StringIO()
    results = ProbeDispatcher(GATEWAYS, announcer, output=out).dispatch([
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.2/24"),
    ])

    assert announcer.targets == [ProbeTarget(
        interface="eth0",
        source=ipaddress.IPv4Address("10.0.0.2"),
        gateway=ipaddress.IPv4Address("10.0.0.1"),
    )]
    assert len(results) == 1
    assert "sent from 10.0.0.2" in out.getvalue()


def test_dispatch_builds_arping_arguments():
    target = next(ProbeDispatcher(GATEWAYS, RecordingAnnouncer()).targets([
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.2/24"),
    ]))
    cmd = ArpingAnnouncer(arping_bin="arping").build_command(target)
    assert cmd[1:] == ["-U", "-c", "1", "-I", "eth0", "-s", "10.0.0.2", "10.0.0.1"]


def test_dispatch_skips_interface_without_gateway_and_continues():
    announcer = RecordingAnnouncer()
    ProbeDispatcher(GATEWAYS, announcer, output=io.StringIO()).dispatch([
        LocalAddress("wlan0", "11:22:33:44:55:66", "192.168.5.9/24"),
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.2/24"),
    ])
    assert [t.interface for t in announcer.targets] == ["eth0"]


def test_dispatch_skips_non_ipv4_addresses():
    announcer = RecordingAnnouncer()
    ProbeDispatcher(GATEWAYS, announcer, output=io.StringIO()).dispatch([
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "fe80::a8bb:ccff:fedd:eeff/64"),
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "not-an-address"),
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.3/24"),
    ])
    assert [str(t.source) for t in announcer.targets] == ["10.0.0.3"]


def test_dispatch_failure_aborts_remaining_targets():
    announcer = RecordingAnnouncer(fail_on="10.0.0.2")
    dispatcher = ProbeDispatcher(GATEWAYS, announcer, output=io.StringIO())
    with pytest.raises(AnnounceError):
        dispatcher.dispatch([
            LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.2/24"),
            LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.3/24"),
        ])
    assert [str(t.source) for t in announcer.targets] == ["10.0.0.2"]


def test_dispatch_nothing_eligible():
    announcer = RecordingAnnouncer()
    results = ProbeDispatcher({}, announcer).dispatch([
        LocalAddress("eth0", "aa:bb:cc:dd:ee:ff", "10.0.0.2/24"),
    ])
    assert results == []
    assert announcer.targets == []
