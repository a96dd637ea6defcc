import json
import logging
import os
import shlex
import sys
from typing import List, Optional, Sequence, TextIO

from pydantic import ValidationError

from .domain import Commands, ResponseCode, ResponseSink, RouteResult
from .errors import InvalidCommand
from .secondary_table_controller import SecondaryTableController

ROUTE_USAGE = (
    "Usage: route <add|remove> <iface> secondary <dst> <prefix> <gateway>"
    " | route status [<iface>]"
)


class ConsoleResponseSink:
    """Writes one netd-style response line per outcome, e.g. `200 Route modified`"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def send_msg(self, code: int, message: str, errno: Optional[int] = None) -> None:
        line = f"{code} {message}"
        if errno:
            line += f" ({os.strerror(errno)})"
        self.stream.write(line + "\n")
        self.stream.flush()


class RouteCommandDispatcher:
    """Parses `route ...` command words and runs them against one controller"""

    def __init__(self, controller: SecondaryTableController):
        self.logger = logging.getLogger(__name__)
        self.controller = controller

    def dispatch(self, words: Sequence[str], client: Optional[ResponseSink] = None) -> RouteResult:
        try:
            command = self.parse(words)
        except InvalidCommand as e:
            self.logger.warning(f"Rejected command {list(words)}: {e.message}")
            result = RouteResult(
                success=False, code=e.response_code, message=e.message, errno=e.errno
            )
            if client is not None:
                client.send_msg(int(result.code), result.message, result.errno)
            return result

        if isinstance(command, Commands.GetInterfaceStatus):
            status = self.controller.get_interface_status(command.interface_name)
            result = RouteResult(
                success=True,
                code=ResponseCode.COMMAND_OKAY,
                message=json.dumps(status, sort_keys=True),
                interface_name=command.interface_name,
            )
            if client is not None:
                client.send_msg(int(result.code), result.message)
            return result

        handler = (
            self.controller.add_route
            if isinstance(command, Commands.AddRoute)
            else self.controller.remove_route
        )
        return handler(
            command.interface,
            command.destination,
            command.prefix_length,
            command.gateway,
            client=client,
        )

    @staticmethod
    def parse(words: Sequence[str]):
        args: List[str] = list(words)
        if len(args) < 2 or args[0] != "route":
            raise InvalidCommand(ROUTE_USAGE)

        verb = args[1]
        if verb == "status":
            if len(args) > 3:
                raise InvalidCommand(ROUTE_USAGE)
            return Commands.GetInterfaceStatus(
                interface_name=args[2] if len(args) == 3 else None
            )

        if verb not in ("add", "remove") or len(args) != 7:
            raise InvalidCommand(ROUTE_USAGE)
        if args[3] != "secondary":
            raise InvalidCommand(
                "Only secondary routes are supported",
                response_code=ResponseCode.COMMAND_PARAMETER_ERROR,
            )

        model = Commands.AddRoute if verb == "add" else Commands.RemoveRoute
        try:
            return model(
                interface=args[2],
                destination=args[4],
                prefix_length=args[5],
                gateway=args[6],
            )
        except ValidationError as e:
            field = e.errors()[0]["loc"][0] if e.errors() else "argument"
            raise InvalidCommand(
                f"Invalid {field}", response_code=ResponseCode.COMMAND_PARAMETER_ERROR
            ) from e

    def serve(self, stream_in: TextIO, client: ResponseSink) -> int:
        """Dispatch commands line by line until EOF. Returns the number of failures."""
        failures = 0
        for line in stream_in:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                words = shlex.split(line)
            except ValueError as e:
                words = []
                self.logger.warning(f"Unable to parse '{line}': {e}")
            result = self.dispatch(words, client)
            if not result.success:
                failures += 1
        return failures
