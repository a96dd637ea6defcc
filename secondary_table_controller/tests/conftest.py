"""
Pytest configuration and shared fixtures for secondary-table-controller tests
"""
import logging
from ipaddress import IPv4Address
from typing import Dict, List, Optional, Tuple

import pytest

from secondary_table_controller.lib.logging_utils import setup_logging
from secondary_table_controller.lib.network_control import (
    CommandRunner,
    InterfaceAddress,
    MultipathCapabilityProbe,
    MultipathRuleSynchronizer,
    RouteCommandBuilder,
    SecondaryTableController,
    SlotRegistry,
)
from secondary_table_controller.models.command_result import CommandResult


class RecordingExecutor:
    """Stands in for run_command; records argv and returns canned exit codes"""

    def __init__(self):
        self.calls: List[List[str]] = []
        self.return_codes: Dict[str, int] = {}
        self.default_return_code = 0

    def fail_when(self, fragment: str, return_code: int = 2):
        self.return_codes[fragment] = return_code

    def __call__(self, argv: List[str]) -> CommandResult:
        self.calls.append(list(argv))
        line = " ".join(argv)
        for fragment, code in self.return_codes.items():
            if fragment in line:
                return CommandResult("", "RTNETLINK answers: No such process\n", code)
        return CommandResult("", "", self.default_return_code)

    @property
    def lines(self) -> List[str]:
        return [" ".join(c) for c in self.calls]


class StaticEnumerator:
    def __init__(self, entries: Optional[List[Tuple[str, str]]] = None):
        self.entries = entries or []
        self.calls = 0

    def list_addresses(self) -> List[InterfaceAddress]:
        self.calls += 1
        return [
            InterfaceAddress(name=name, address=IPv4Address(addr))
            for name, addr in self.entries
        ]


class RecordingSink:
    def __init__(self):
        self.messages: List[Tuple[int, str, Optional[int]]] = []

    def send_msg(self, code: int, message: str, errno: Optional[int] = None) -> None:
        self.messages.append((code, message, errno))


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests with appropriate levels"""
    setup_logging(level=logging.INFO)
    logging.getLogger("pyroute2").setLevel(logging.WARNING)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def enumerator() -> StaticEnumerator:
    return StaticEnumerator(
        [
            ("lo", "127.0.0.1"),
            ("wlan0", "192.168.1.20"),
            ("rmnet0", "10.64.3.7"),
            ("wlan0:1", "192.168.1.21"),
        ]
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def builder() -> RouteCommandBuilder:
    return RouteCommandBuilder(ip_path="ip")


@pytest.fixture
def runner(executor) -> CommandRunner:
    return CommandRunner(executor=executor)


def make_controller(runner, builder, enumerator, multipath: bool = False, capacity=16, base=100):
    synchronizer = MultipathRuleSynchronizer(
        runner,
        builder,
        enumerator,
        MultipathCapabilityProbe(mode="on" if multipath else "off"),
    )
    return SecondaryTableController(
        registry=SlotRegistry(capacity=capacity, base_table_number=base),
        builder=builder,
        runner=runner,
        synchronizer=synchronizer,
    )


@pytest.fixture
def controller(runner, builder, enumerator) -> SecondaryTableController:
    """Sixteen tables from 100, multipath disabled"""
    return make_controller(runner, builder, enumerator)


@pytest.fixture
def multipath_controller(runner, builder, enumerator) -> SecondaryTableController:
    return make_controller(runner, builder, enumerator, multipath=True)


@pytest.fixture
def controller_factory(runner, builder, enumerator):
    def factory(**kwargs) -> SecondaryTableController:
        return make_controller(runner, builder, enumerator, **kwargs)

    return factory
