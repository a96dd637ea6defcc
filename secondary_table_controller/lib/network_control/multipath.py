import logging
import os
from typing import Iterable, Literal, Optional

from pyroute2 import NetlinkError

from secondary_table_controller.constants import MPTCP_PROBE_PATHS

from .command_builder import RouteCommandBuilder
from .command_runner import CommandRunner
from .domain import RouteAction
from .errors import CommandTooLong
from .interface_enumerator import InterfaceAddressEnumerator


class MultipathCapabilityProbe:
    """Reports whether the kernel exposes multipath TCP path management"""

    def __init__(
        self,
        probe_paths: Optional[Iterable[str]] = None,
        mode: Literal["auto", "on", "off"] = "auto",
    ):
        self.probe_paths = list(probe_paths or MPTCP_PROBE_PATHS)
        self.mode = mode

    def is_supported(self) -> bool:
        if self.mode != "auto":
            return self.mode == "on"
        return any(os.path.exists(path) for path in self.probe_paths)


class MultipathRuleSynchronizer:
    """
    Mirrors route changes with `ip rule ... from <address> table <id>` so that
    multipath subflows sourced from an interface's address use its table.

    Rule commands are fire-and-forget: their outcome is logged but never
    reported to the caller or used to roll back the route change.
    """

    def __init__(
        self,
        runner: CommandRunner,
        builder: RouteCommandBuilder,
        enumerator: InterfaceAddressEnumerator,
        probe: Optional[MultipathCapabilityProbe] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"Initializing {__name__}")

        self.runner = runner
        self.builder = builder
        self.enumerator = enumerator
        self.probe = probe if probe is not None else MultipathCapabilityProbe()

    def synchronize(self, action: RouteAction, interface_name: str, table_id: int) -> int:
        """Returns the number of rule commands issued."""
        if not self.probe.is_supported():
            return 0

        try:
            addresses = self.enumerator.list_addresses()
        except (NetlinkError, OSError) as e:
            self.logger.error(f"Unable to enumerate interface addresses: {e}")
            return 0

        issued = 0
        for entry in addresses:
            if entry.name != interface_name:
                continue
            try:
                command = self.builder.rule(action, str(entry.address), table_id)
            except CommandTooLong:
                continue
            status = self.runner.run(command)
            issued += 1
            if status != 0:
                self.logger.warning(f"Rule command '{command}' exited {status}")
            else:
                self.logger.debug(f"Rule command '{command}' succeeded")
        return issued
