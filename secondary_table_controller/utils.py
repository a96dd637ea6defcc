import logging
import subprocess

from secondary_table_controller.models.command_result import CommandResult
from secondary_table_controller.models.runcommand_error import RunCommandError

logger = logging.getLogger(__name__)


def run_command(cmd: list, shell=False, raise_on_fail=True) -> CommandResult:
    """Run a single CLI command with subprocess and returns the output"""
    logger.debug(f"Running command: {cmd}")
    cp = subprocess.run(
        cmd,
        encoding="utf-8",
        shell=shell,
        check=False,
        capture_output=True,
    )
    if raise_on_fail and cp.returncode != 0:
        raise RunCommandError(cp.stderr, cp.returncode)
    return CommandResult(cp.stdout, cp.stderr, cp.returncode)


def get_full_class_name(obj: object) -> str:
    """
    Gets the full class name and path of an object for use in errors.
    :param obj: The object to get the name and path of
    :return: The full name and path as a string.
    """
    module = obj.__class__.__module__
    if module is None or module == str.__class__.__module__:
        return obj.__class__.__name__
    return module + "." + obj.__class__.__name__
