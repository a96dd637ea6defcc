import errno as errno_codes
from typing import Optional

from .domain import ResponseCode


class SecondaryTableError(Exception):
    """Base for failures reported back to the client"""

    response_code = ResponseCode.OPERATION_FAILED
    errno = errno_codes.ENODEV
    message = "Operation failed"

    def __init__(self, detail: Optional[str] = None, message: Optional[str] = None):
        if message is not None:
            self.message = message
        self.detail = detail or self.message
        super().__init__(self.detail)


class ResourceExhausted(SecondaryTableError):
    """Every table slot is held by another interface"""

    message = "Max number NATed"


class InterfaceNotFound(SecondaryTableError):
    """No table slot is held by the interface"""

    message = "Interface not found"


class CommandTooLong(SecondaryTableError):
    response_code = ResponseCode.COMMAND_SYNTAX_ERROR
    errno = errno_codes.E2BIG
    message = "Too long"


class ExecutionFailed(SecondaryTableError):
    """The ip tool exited non-zero"""

    message = "ip route modification failed"

    def __init__(self, detail: Optional[str] = None, return_code: Optional[int] = None):
        super().__init__(detail)
        self.return_code = return_code


class InvalidCommand(SecondaryTableError):
    response_code = ResponseCode.COMMAND_SYNTAX_ERROR
    errno = None
    message = "Invalid command"

    def __init__(self, message: str, response_code: Optional[ResponseCode] = None):
        super().__init__(message=message)
        if response_code is not None:
            self.response_code = response_code
