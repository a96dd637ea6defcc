"""
Network Control Module

Manages a fixed pool of secondary policy-routing tables, one per active
interface, on a multi-homed device. It handles:
- Table slot allocation and per-slot route reference counting
- Rendering and running `ip route` commands against those tables
- Mirroring source rules for multipath TCP when the kernel supports it
- A netd-style `route ...` command surface

Main components:
- SecondaryTableController: add_route / remove_route entry points
- SlotRegistry / RuleRefCounter: interface -> table bookkeeping
- RouteCommandBuilder / CommandRunner: command rendering and execution
- MultipathRuleSynchronizer: source rule mirroring
- RouteCommandDispatcher: parses command words and reports responses

Usage:
    from secondary_table_controller.lib.network_control import SecondaryTableController

    controller = SecondaryTableController()
    result = controller.add_route("wlan0", "192.168.1.0", 24, "192.168.1.1")
    if not result.success:
        print(result.code, result.message)
"""

from .command_builder import RouteCommandBuilder
from .command_dispatcher import ConsoleResponseSink, RouteCommandDispatcher
from .command_runner import CommandRunner
from .domain import (
    Commands,
    InterfaceAddress,
    ResponseCode,
    RouteAction,
    RouteMutationRequest,
    RouteResult,
    TableSlot,
)
from .errors import (
    CommandTooLong,
    ExecutionFailed,
    InterfaceNotFound,
    InvalidCommand,
    ResourceExhausted,
    SecondaryTableError,
)
from .interface_enumerator import InterfaceAddressEnumerator
from .multipath import MultipathCapabilityProbe, MultipathRuleSynchronizer
from .secondary_table_controller import SecondaryTableController
from .slot_registry import RuleRefCounter, SlotRegistry

__all__ = [
    "SecondaryTableController",
    "SlotRegistry",
    "RuleRefCounter",
    "RouteCommandBuilder",
    "CommandRunner",
    "InterfaceAddressEnumerator",
    "MultipathCapabilityProbe",
    "MultipathRuleSynchronizer",
    "RouteCommandDispatcher",
    "ConsoleResponseSink",
    "Commands",
    "InterfaceAddress",
    "ResponseCode",
    "RouteAction",
    "RouteMutationRequest",
    "RouteResult",
    "TableSlot",
    "SecondaryTableError",
    "ResourceExhausted",
    "InterfaceNotFound",
    "CommandTooLong",
    "ExecutionFailed",
    "InvalidCommand",
]
