import logging
import threading
from typing import Dict, Optional

from pydantic import ValidationError

from secondary_table_controller.constants import UNSPECIFIED_GATEWAY
from secondary_table_controller.lib.configuration.schemas import ControllerConfig

from .command_builder import RouteCommandBuilder
from .command_runner import CommandRunner
from .domain import (
    ResponseCode,
    ResponseSink,
    RouteAction,
    RouteMutationRequest,
    RouteResult,
    TableSlot,
)
from .errors import (
    ExecutionFailed,
    InterfaceNotFound,
    InvalidCommand,
    ResourceExhausted,
    SecondaryTableError,
)
from .interface_enumerator import InterfaceAddressEnumerator
from .multipath import MultipathCapabilityProbe, MultipathRuleSynchronizer
from .slot_registry import RuleRefCounter, SlotRegistry


class SecondaryTableController:
    """
    Attaches routes to per-interface secondary routing tables.

    The first route added for an interface claims a table slot; the slot is
    returned to the pool when the interface's last route is removed. Slot and
    ref count state only change after the route command succeeds.

    Calls block while the `ip` tool runs and there is no timeout. add_route and
    remove_route are serialized by an internal lock.
    """

    def __init__(
        self,
        registry: Optional[SlotRegistry] = None,
        builder: Optional[RouteCommandBuilder] = None,
        runner: Optional[CommandRunner] = None,
        synchronizer: Optional[MultipathRuleSynchronizer] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"Initializing {__name__}")

        self.registry = registry if registry is not None else SlotRegistry()
        self.ref_counter = RuleRefCounter(self.registry)
        self.builder = builder if builder is not None else RouteCommandBuilder()
        self.runner = runner if runner is not None else CommandRunner()
        if synchronizer is None:
            synchronizer = MultipathRuleSynchronizer(
                self.runner, self.builder, InterfaceAddressEnumerator()
            )
        self.synchronizer = synchronizer
        self.lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ControllerConfig) -> "SecondaryTableController":
        builder = RouteCommandBuilder(
            ip_path=config.Commands.ip_path,
            max_length=config.Commands.max_command_length,
        )
        runner = CommandRunner(max_length=config.Commands.max_command_length)
        synchronizer = MultipathRuleSynchronizer(
            runner,
            builder,
            InterfaceAddressEnumerator(max_interfaces=config.Multipath.max_interfaces),
            MultipathCapabilityProbe(
                probe_paths=config.Multipath.probe_paths, mode=config.Multipath.mode
            ),
        )
        return cls(
            registry=SlotRegistry(
                capacity=config.Tables.interfaces_tracked,
                base_table_number=config.Tables.base_table_number,
            ),
            builder=builder,
            runner=runner,
            synchronizer=synchronizer,
        )

    def add_route(
        self,
        interface: str,
        destination: str,
        prefix_length: int,
        gateway: str = UNSPECIFIED_GATEWAY,
        client: Optional[ResponseSink] = None,
    ) -> RouteResult:
        with self.lock:
            try:
                request = self._request(interface, destination, prefix_length, gateway)
                slot = self.registry.find_slot(interface)
                if slot is None:
                    # Only claimed once the route command succeeds
                    slot = self.registry.find_free_slot()
                    if slot is None:
                        raise ResourceExhausted(f"No free table slot for {interface}")

                self.synchronizer.synchronize(RouteAction.ADD, interface, slot.table_id)
                result = self.modify_route(RouteAction.ADD, request, slot)
            except SecondaryTableError as e:
                result = self._failure(e, interface)
        return self._respond(result, client)

    def remove_route(
        self,
        interface: str,
        destination: str,
        prefix_length: int,
        gateway: str = UNSPECIFIED_GATEWAY,
        client: Optional[ResponseSink] = None,
    ) -> RouteResult:
        with self.lock:
            try:
                request = self._request(interface, destination, prefix_length, gateway)
                slot = self.registry.find_slot(interface)
                if slot is None:
                    raise InterfaceNotFound(f"{interface} holds no secondary table")

                self.synchronizer.synchronize(RouteAction.DEL, interface, slot.table_id)
                result = self.modify_route(RouteAction.DEL, request, slot)
            except SecondaryTableError as e:
                result = self._failure(e, interface)
        return self._respond(result, client)

    def modify_route(
        self, action: RouteAction, request: RouteMutationRequest, slot: TableSlot
    ) -> RouteResult:
        """
        Run the route command against the slot's table and update the slot.

        The slot may be an unclaimed free slot on the first add for an
        interface; it is allocated here once the command has succeeded.
        Raises ExecutionFailed or CommandTooLong without touching any state.
        """
        table_id = slot.table_id
        command = self.builder.route(action, request, table_id)
        status = self.runner.run(command)
        if status != 0:
            self.logger.error(f"ip route {action.value} failed ({status}): {command}")
            raise ExecutionFailed(command, return_code=status)

        if action is RouteAction.ADD:
            if slot.is_free:
                slot = self.registry.allocate(request.interface, index=slot.index)
            self.ref_counter.increment(slot)
        else:
            if self.ref_counter.decrement(slot):
                self.logger.info(f"Table {table_id} released by {request.interface}")

        self.logger.info(f"Route modified: {command}")
        return RouteResult(
            success=True,
            code=ResponseCode.COMMAND_OKAY,
            message="Route modified",
            interface_name=request.interface,
            table_id=table_id,
            command=command,
        )

    def get_interface_status(self, interface_name: Optional[str] = None) -> Dict:
        """Get table assignments for one or all interfaces"""
        with self.lock:
            if interface_name:
                slot = self.registry.find_slot(interface_name)
                return {
                    "interface": interface_name,
                    "table_id": slot.table_id if slot else None,
                    "rule_count": slot.rule_count if slot else 0,
                }
            return {
                "capacity": self.registry.capacity,
                "base_table_number": self.registry.base_table_number,
                "interfaces": {
                    s.interface_name: {"table_id": s.table_id, "rule_count": s.rule_count}
                    for s in self.registry.snapshot()
                },
            }

    @staticmethod
    def _request(
        interface: str, destination: str, prefix_length: int, gateway: str
    ) -> RouteMutationRequest:
        try:
            return RouteMutationRequest(
                interface=interface,
                destination=destination,
                prefix_length=prefix_length,
                gateway=gateway,
            )
        except ValidationError as e:
            field = e.errors()[0]["loc"][0] if e.errors() else "argument"
            raise InvalidCommand(
                f"Invalid {field}", response_code=ResponseCode.COMMAND_PARAMETER_ERROR
            ) from e

    def _failure(self, error: SecondaryTableError, interface: str) -> RouteResult:
        self.logger.error(f"{error.message}: {error.detail}")
        return RouteResult(
            success=False,
            code=error.response_code,
            message=error.message,
            errno=error.errno,
            interface_name=interface if isinstance(interface, str) else None,
            table_id=None,
        )

    @staticmethod
    def _respond(result: RouteResult, client: Optional[ResponseSink]) -> RouteResult:
        if client is not None:
            client.send_msg(int(result.code), result.message, result.errno)
        return result
