import argparse
import logging
import sys
from typing import List, Optional

from secondary_table_controller.__version__ import __version__
from secondary_table_controller.constants import CONFIG_FILE
from secondary_table_controller.lib.configuration.controller_config_file import (
    ControllerConfigFile,
)
from secondary_table_controller.lib.logging_utils import setup_logging
from secondary_table_controller.lib.network_control import (
    ConsoleResponseSink,
    RouteCommandDispatcher,
    SecondaryTableController,
)
from secondary_table_controller.utils import get_full_class_name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secondary-table-controller",
        description="Manage per-interface secondary routing tables. With no "
        "command words, commands are read one per line from stdin.",
    )
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to config.toml")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "words",
        nargs=argparse.REMAINDER,
        help="e.g. route add wlan0 secondary 192.168.1.0 24 192.168.1.1",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO)
    logger = logging.getLogger("secondary_table_controller.cli")

    config_file = ControllerConfigFile(args.config)
    config_file.load_or_create_defaults()

    controller = SecondaryTableController.from_config(config_file.config)
    dispatcher = RouteCommandDispatcher(controller)
    client = ConsoleResponseSink(sys.stdout)

    try:
        if args.words:
            return 0 if dispatcher.dispatch(args.words, client).success else 1
        failures = dispatcher.serve(sys.stdin, client)
        return 0 if failures == 0 else 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Unhandled {get_full_class_name(e)}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
