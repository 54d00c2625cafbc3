"""
Orchestration Module

This package provides the pipeline that correlates default gateways with
local addresses and dispatches the ARP announcements.
"""

from orchestration.dispatcher import ProbeDispatcher
from orchestration.orchestrator import ArpingAllOrchestrator

__all__ = ['ProbeDispatcher', 'ArpingAllOrchestrator']
