import os
from typing import Optional

from pydantic import ValidationError

from secondary_table_controller import constants
from secondary_table_controller.lib.configuration.config_file import ConfigFile
from secondary_table_controller.lib.configuration.schemas import ControllerConfig

CONTROLLER_CONFIG_DIR = constants.CONFIG_DIR


class ControllerConfigFile(ConfigFile):
    def __init__(self, config_file: Optional[str] = None):
        super().__init__(
            config_file or os.path.join(CONTROLLER_CONFIG_DIR, "config.toml"),
            defaults=ControllerConfig().model_dump(),
        )

    def load_or_create_defaults(self, allow_empty: bool = False):  # type: ignore[override]
        super().load_or_create_defaults(allow_empty=allow_empty)
        # Validate and normalize with schema; fall back to defaults on error
        try:
            self.data = ControllerConfig.model_validate(self.data).model_dump()
        except ValidationError as e:
            self.logger.warning(f"Invalid controller config, using defaults. Error: {e}")
            self.create_defaults()

    @property
    def config(self) -> ControllerConfig:
        return ControllerConfig.model_validate(self.data)


if __name__ == "__main__":
    cfg = ControllerConfigFile()
    cfg.load_or_create_defaults()
    print(cfg.data)
