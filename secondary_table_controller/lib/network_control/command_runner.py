import logging
from functools import partial
from typing import Callable, List, Optional

from secondary_table_controller.constants import MAX_COMMAND_LENGTH
from secondary_table_controller.models.command_result import CommandResult
from secondary_table_controller.utils import run_command

from .command_builder import check_command_length

# What a shell reports when the program cannot be started
EXIT_CANNOT_EXECUTE = 127


class CommandRunner:
    """Runs one routing command line without a shell and returns its exit status"""

    def __init__(
        self,
        executor: Optional[Callable[[List[str]], CommandResult]] = None,
        max_length: int = MAX_COMMAND_LENGTH,
    ):
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"Initializing {__name__}")

        if executor is None:
            executor = partial(run_command, raise_on_fail=False)
        self.executor = executor
        self.max_length = max_length

    def run(self, command: str) -> int:
        check_command_length(command, self.max_length)
        # Fields are validated to be single tokens, so plain splitting is exact
        argv = command.split()
        try:
            result = self.executor(argv)
        except OSError as e:
            self.logger.error(f"Unable to execute '{command}': {e}")
            return EXIT_CANNOT_EXECUTE

        if not result.success:
            self.logger.debug(
                f"'{command}' exited {result.return_code}: {result.stderr.strip()}"
            )
        return result.return_code
