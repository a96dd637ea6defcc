import logging
from ipaddress import IPv6Address, ip_address
from typing import Optional

from secondary_table_controller.constants import IP_PATH, MAX_COMMAND_LENGTH

from .domain import RouteAction, RouteMutationRequest
from .errors import CommandTooLong

logger = logging.getLogger(__name__)


def check_command_length(command: str, max_length: int = MAX_COMMAND_LENGTH) -> str:
    """Reject command lines that would not fit a max_length buffer with its terminator."""
    if len(command) >= max_length:
        logger.error(f"ip command ({command}) too long")
        raise CommandTooLong(f"Command is {len(command)} characters, limit {max_length - 1}")
    return command


def is_unspecified_gateway(gateway: Optional[str]) -> bool:
    # `ip` rejects "::" as a next hop, so treat it (like 0.0.0.0 for v4) as on-link
    if gateway is None or gateway.strip() == "":
        return True
    try:
        address = ip_address(gateway.strip())
    except ValueError:
        return False
    return isinstance(address, IPv6Address) and address.is_unspecified


class RouteCommandBuilder:
    """Renders ip route / ip rule command lines for secondary tables"""

    def __init__(self, ip_path: str = IP_PATH, max_length: int = MAX_COMMAND_LENGTH):
        self.ip_path = ip_path
        self.max_length = max_length

    def route(self, action: RouteAction, request: RouteMutationRequest, table_id: int) -> str:
        parts = [
            self.ip_path,
            "route",
            action.value,
            f"{request.destination}/{request.prefix_length}",
        ]
        if not is_unspecified_gateway(request.gateway):
            parts += ["via", request.gateway]
        parts += ["dev", request.interface, "table", str(table_id)]
        return check_command_length(" ".join(parts), self.max_length)

    def rule(self, action: RouteAction, address: str, table_id: int) -> str:
        command = f"{self.ip_path} rule {action.value} from {address} table {table_id}"
        return check_command_length(command, self.max_length)
