from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, model_validator

from secondary_table_controller import constants


class TablesSection(BaseModel):
    base_table_number: int = Field(default=constants.BASE_TABLE_NUMBER, ge=1, le=2**32 - 1)
    interfaces_tracked: int = Field(default=constants.INTERFACES_TRACKED, ge=1)

    @model_validator(mode="after")
    def check_reserved_tables(self):
        table_ids = range(
            self.base_table_number, self.base_table_number + self.interfaces_tracked
        )
        clashes = sorted(t for t in constants.RESERVED_TABLE_IDS if t in table_ids)
        if clashes:
            raise ValueError(
                f"Table range {table_ids.start}-{table_ids.stop - 1} overlaps reserved tables {clashes}"
            )
        return self


class CommandsSection(BaseModel):
    ip_path: str = Field(default=constants.IP_PATH, min_length=1)
    max_command_length: int = Field(default=constants.MAX_COMMAND_LENGTH, ge=16)


class MultipathSection(BaseModel):
    # auto: consult the probe paths on every call
    mode: Literal["auto", "on", "off"] = Field(default="auto")
    probe_paths: List[str] = Field(default_factory=lambda: list(constants.MPTCP_PROBE_PATHS))
    max_interfaces: int = Field(default=constants.MAX_ENUMERATED_INTERFACES, ge=1)


class ControllerConfig(BaseModel):
    Tables: TablesSection = Field(default_factory=TablesSection)
    Commands: CommandsSection = Field(default_factory=CommandsSection)
    Multipath: MultipathSection = Field(default_factory=MultipathSection)
