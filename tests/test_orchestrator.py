# tests/test_orchestrator.py
import subprocess

import netifaces
import pytest

from core import announcer as announcer_module
from core import network_utils
from orchestration.orchestrator import main


ROUTES = "\n".join([
    "Iface\tDestination\tGateway \tFlags\tRefCnt\tUse\tMetric\tMask",
    "eth0\t00000000\t0100000A\t0003\t0\t0\t0\t00000000",
    "eth0\t0000000A\t00000000\t0001\t0\t0\t0\t00FFFFFF",
    "",
])

IFADDRESSES = {
    "lo": {
        netifaces.AF_LINK: [{"addr": "00:00:00:00:00:00"}],
        netifaces.AF_INET: [{"addr": "127.0.0.1", "netmask": "255.0.0.0"}],
    },
    "eth0": {
        netifaces.AF_LINK: [{"addr": "aa:bb:cc:dd:ee:ff"}],
        netifaces.AF_INET: [{"addr": "10.0.0.2", "netmask": "255.255.255.0"}],
    },
}


@pytest.fixture
def route_file(tmp_path):
    path = tmp_path / "route"
    path.write_text(ROUTES)
    return str(path)


@pytest.fixture
def host(monkeypatch):
    monkeypatch.setattr(network_utils.netifaces, "interfaces", lambda: list(IFADDRESSES))
    monkeypatch.setattr(network_utils.netifaces, "ifaddresses", lambda name: IFADDRESSES[name])


@pytest.fixture
def arping(monkeypatch):
    state = {"calls": [], "returncode": 0}

    def fake_run(cmd, **kwargs):
        state["calls"].append(cmd)
        return subprocess.CompletedProcess(cmd, state["returncode"], stdout="Sent 1 probes (1 broadcast(s))\n")

    monkeypatch.setattr(announcer_module.subprocess, "run", fake_run)
    return state


def test_main_announces_each_address(route_file, host, arping, capsys):
    rc = main(["--route-file", route_file, "--arping", "arping", "--byte-order", "little"])
    assert rc == 0
    assert arping["calls"] == [
        ["arping", "-U", "-c", "1", "-I", "eth0", "-s", "10.0.0.2", "10.0.0.1"],
    ]
    assert "Sent 1 probes" in capsys.readouterr().out


def test_main_dry_run(route_file, host, arping):
    rc = main(["--route-file", route_file, "--byte-order", "little", "--dry-run"])
    assert rc == 0
    assert arping["calls"] == []


def test_main_list(route_file, host, arping, capsys):
    rc = main(["--route-file", route_file, "--byte-order", "little", "--list"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "eth0" in out
    assert "Gateway: 10.0.0.1" in out
    assert arping["calls"] == []


def test_main_missing_route_file(tmp_path, host, arping):
    rc = main(["--route-file", str(tmp_path / "missing"), "--byte-order", "little"])
    assert rc == 1
    assert arping["calls"] == []


def test_main_malformed_route_file(tmp_path, host, arping):
    path = tmp_path / "route"
    path.write_text("Iface\tDestination\tGateway\neth0\t00000000\n")
    assert main(["--route-file", str(path), "--byte-order", "little"]) == 1
    assert arping["calls"] == []


def test_main_interface_listing_failure(route_file, monkeypatch, arping):
    def broken():
        raise OSError("netlink unavailable")
    monkeypatch.setattr(network_utils.netifaces, "interfaces", broken)
    assert main(["--route-file", route_file, "--byte-order", "little"]) == 1


def test_main_arping_failure(route_file, host, arping):
    arping["returncode"] = 2
    assert main(["--route-file", route_file, "--arping", "arping", "--byte-order", "little"]) == 1
    assert len(arping["calls"]) == 1
