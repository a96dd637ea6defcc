import typing as t
from enum import Enum, IntEnum
from ipaddress import IPv4Address
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from secondary_table_controller.constants import UNSPECIFIED_GATEWAY


class RouteAction(Enum):
    """Verb passed to `ip route` / `ip rule`"""

    ADD = "add"
    DEL = "del"


class ResponseCode(IntEnum):
    """Response codes reported to the command client"""

    COMMAND_OKAY = 200
    OPERATION_FAILED = 400
    COMMAND_SYNTAX_ERROR = 500
    COMMAND_PARAMETER_ERROR = 501


class TableSlot(BaseModel):
    """One secondary routing table and the interface currently holding it"""

    index: int = Field(..., ge=0, description="Position in the table pool")
    table_id: int = Field(..., description="Kernel routing table id for this slot")
    interface_name: str = Field("", description="Owning interface, empty when free")
    rule_count: int = Field(0, ge=0, description="Live routes in this table")

    @property
    def is_free(self) -> bool:
        return self.interface_name == ""


class RouteMutationRequest(BaseModel):
    """A single route to add to or remove from an interface's table"""

    interface: str = Field(..., min_length=1, description="Interface name (e.g., wlan0)")
    destination: str = Field(..., min_length=1, description="Destination network address")
    prefix_length: int = Field(..., ge=0, le=128)
    gateway: str = Field(
        UNSPECIFIED_GATEWAY, description="Next hop, '::' for a device-only route"
    )

    @field_validator("interface", "destination", "gateway")
    @classmethod
    def single_token(cls, v: str) -> str:
        # Each field becomes exactly one argv entry of the ip command
        if any(c.isspace() for c in v):
            raise ValueError("must not contain whitespace")
        return v


class InterfaceAddress(BaseModel):
    """An address assigned to a configured interface"""

    name: str = Field(..., description="Interface label as reported by the kernel")
    address: IPv4Address


class RouteResult(BaseModel):
    """Outcome of an add/remove call, one per call"""

    success: bool = Field(..., description="Whether the operation succeeded")
    code: ResponseCode
    message: str
    errno: Optional[int] = Field(None, description="Cause code for failures")
    interface_name: Optional[str] = None
    table_id: Optional[int] = None
    command: Optional[str] = Field(None, description="Route command that was run")


class ResponseSink(t.Protocol):
    """Where outcomes are reported back to the requesting client"""

    def send_msg(self, code: int, message: str, errno: Optional[int] = None) -> None:
        ...


class Commands:
    """Commands accepted by the dispatcher"""

    class AddRoute(RouteMutationRequest):
        pass

    class RemoveRoute(RouteMutationRequest):
        pass

    class GetInterfaceStatus(BaseModel):
        interface_name: Optional[str] = Field(
            None, description="Specific interface or all if None"
        )
