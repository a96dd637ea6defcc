import logging
from typing import Dict, List, Optional

from secondary_table_controller.constants import (
    BASE_TABLE_NUMBER,
    INTERFACES_TRACKED,
    MAX_INTERFACE_NAME_LENGTH,
)

from .domain import TableSlot
from .errors import ResourceExhausted


class SlotRegistry:
    """
    Bounded map of interface name -> secondary table slot.

    Slot indices are handed out lowest-first and a slot keeps its index (and so
    its table id) until it is released. Not thread safe on its own; the
    controller serializes access.
    """

    def __init__(
        self,
        capacity: int = INTERFACES_TRACKED,
        base_table_number: int = BASE_TABLE_NUMBER,
    ):
        self.logger = logging.getLogger(__name__)
        self.logger.info(
            f"Initializing {__name__} with {capacity} tables from {base_table_number}"
        )
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.capacity = capacity
        self.base_table_number = base_table_number
        self.slots: Dict[str, TableSlot] = {}

    @staticmethod
    def normalize_name(interface_name: str) -> str:
        return interface_name[:MAX_INTERFACE_NAME_LENGTH]

    def table_id_for(self, index: int) -> int:
        return self.base_table_number + index

    def find_slot(self, interface_name: str) -> Optional[TableSlot]:
        """Exact match only; an empty name never matches an occupied slot."""
        if not interface_name:
            return None
        return self.slots.get(self.normalize_name(interface_name))

    def find_free_index(self) -> Optional[int]:
        used = {slot.index for slot in self.slots.values()}
        for index in range(self.capacity):
            if index not in used:
                return index
        return None

    def find_free_slot(self) -> Optional[TableSlot]:
        """Describe the next free slot without claiming it."""
        index = self.find_free_index()
        if index is None:
            return None
        return TableSlot(index=index, table_id=self.table_id_for(index))

    def allocate(self, interface_name: str, index: Optional[int] = None) -> TableSlot:
        name = self.normalize_name(interface_name)
        if not name:
            raise ValueError("Cannot allocate a slot for an empty interface name")
        if name in self.slots:
            raise ValueError(f"{name} already holds table {self.slots[name].table_id}")

        free_index = self.find_free_index()
        if free_index is None:
            self.logger.error("Max number of NATed interfaces reached")
            raise ResourceExhausted(f"No free table slot for {name}")
        if index is None:
            index = free_index
        elif not 0 <= index < self.capacity or any(
            s.index == index for s in self.slots.values()
        ):
            raise ValueError(f"Slot {index} is not free")

        slot = TableSlot(
            index=index, table_id=self.table_id_for(index), interface_name=name
        )
        self.slots[name] = slot
        self.logger.debug(f"Allocated table {slot.table_id} to {name}")
        return slot

    def release(self, slot: TableSlot):
        if self.slots.get(slot.interface_name) is slot:
            del self.slots[slot.interface_name]
        self.logger.debug(f"Released table {slot.table_id} from {slot.interface_name}")
        slot.interface_name = ""
        slot.rule_count = 0

    def snapshot(self) -> List[TableSlot]:
        return [s.model_copy() for s in sorted(self.slots.values(), key=lambda s: s.index)]

    def __len__(self):
        return len(self.slots)

    def __contains__(self, interface_name: str):
        return self.find_slot(interface_name) is not None


class RuleRefCounter:
    """Tracks live routes per slot and frees the slot when the last one goes."""

    def __init__(self, registry: SlotRegistry):
        self.registry = registry

    def increment(self, slot: TableSlot) -> int:
        slot.rule_count += 1
        return slot.rule_count

    def decrement(self, slot: TableSlot) -> bool:
        """Returns True when the slot was released."""
        slot.rule_count = max(slot.rule_count - 1, 0)
        if slot.rule_count == 0:
            self.registry.release(slot)
            return True
        return False
