import os

RUNTIME_ENV = os.environ.get("RUNTIME_ENV", "production")
IS_DEV = RUNTIME_ENV == "development"

CONFIG_DIR = "/etc/secondary-table-controller"
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.toml")

IP_PATH = "/sbin/ip"

# Pool shape. Table ids BASE_TABLE_NUMBER .. BASE_TABLE_NUMBER + INTERFACES_TRACKED - 1
INTERFACES_TRACKED = 10
BASE_TABLE_NUMBER = 60
# Kernel tables we must never hand out: unspec, default, main, local
RESERVED_TABLE_IDS = frozenset({0, 253, 254, 255})

# Includes the terminator, so a usable line is at most 254 characters
MAX_COMMAND_LENGTH = 255
# IFNAMSIZ
MAX_INTERFACE_NAME_LENGTH = 16

UNSPECIFIED_GATEWAY = "::"

MPTCP_PROBE_PATHS = ["/proc/net/mptcp_pm"]
MAX_ENUMERATED_INTERFACES = 20
