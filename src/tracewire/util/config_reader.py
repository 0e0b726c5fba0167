# (c) Copyright IBM Corp. 2025

from typing import Any, Dict

import yaml

from tracewire.log import logger


class ConfigReader:
    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self.data: Dict[str, Any] = {}
        if file_path:
            self.load_file()
        else:
            logger.warning("ConfigReader: No configuration file specified")

    def load_file(self) -> None:
        """Loads and parses the YAML file"""
        try:
            with open(self.file_path, "r") as file:
                data = yaml.safe_load(file)
        except FileNotFoundError:
            logger.error(
                f"ConfigReader: Configuration file has not found: {self.file_path}"
            )
            return
        except yaml.YAMLError as e:
            logger.error(f"ConfigReader: Error parsing YAML file: {e}")
            return

        if data is None:
            return
        if not isinstance(data, dict):
            logger.error(
                f"ConfigReader: Expected a mapping at the top of {self.file_path}"
            )
            return
        self.data = data

    def section(self, name: str) -> Dict[str, Any]:
        """Returns the named top level mapping, or an empty dict."""
        value = self.data.get(name)
        return value if isinstance(value, dict) else {}
