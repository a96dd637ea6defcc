import logging
import socket
from ipaddress import IPv4Address
from typing import Callable, Dict, List

from pyroute2 import IPRoute

from secondary_table_controller.constants import MAX_ENUMERATED_INTERFACES

from .domain import InterfaceAddress


class InterfaceAddressEnumerator:
    """Lists configured IPv4 interface addresses, at most max_interfaces of them"""

    def __init__(
        self,
        max_interfaces: int = MAX_ENUMERATED_INTERFACES,
        iproute_factory: Callable[[], IPRoute] = IPRoute,
    ):
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"Initializing {__name__}")

        self.max_interfaces = max_interfaces
        self.iproute_factory = iproute_factory

    def list_addresses(self) -> List[InterfaceAddress]:
        """
        Dump IPv4 addresses via netlink.

        Each address is reported under its label (e.g. wlan0 or wlan0:1), falling
        back to the link name. Entries past max_interfaces are dropped.
        """
        addresses: List[InterfaceAddress] = []
        with self.iproute_factory() as ipr:
            link_names: Dict[int, str] = {
                link["index"]: link.get_attr("IFLA_IFNAME") for link in ipr.get_links()
            }
            for msg in ipr.get_addr(family=socket.AF_INET):
                if len(addresses) >= self.max_interfaces:
                    self.logger.debug(
                        f"Address enumeration truncated at {self.max_interfaces} entries"
                    )
                    break
                address = msg.get_attr("IFA_LOCAL") or msg.get_attr("IFA_ADDRESS")
                name = msg.get_attr("IFA_LABEL") or link_names.get(msg["index"])
                if not address or not name:
                    continue
                addresses.append(
                    InterfaceAddress(name=name, address=IPv4Address(address))
                )
        return addresses
