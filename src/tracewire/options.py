# (c) Copyright IBM Corp. 2025

"""
Option class for the tracewire package

Options are resolved in this order of priority:
    environment variables > in-code keyword arguments > YAML configuration file > defaults

The YAML file is located through TRACEWIRE_CONFIG_PATH and may hold:

    tracewire:
      log_level: debug
      propagators: [tracecontext, baggage]
      collection_interval: 30
"""

import logging
import os
from typing import Any, Dict, List, Optional

from tracewire.log import logger, set_log_level
from tracewire.util import is_truthy, split_list
from tracewire.util.config_reader import ConfigReader

KNOWN_PROPAGATORS = ("tracecontext", "baggage")

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return LOG_LEVELS.get(value.strip().lower())
    return None


def parse_propagators(value: Any) -> List[str]:
    """
    Returns the known propagator names in value, in order and without
    duplicates.  Unknown names are logged and dropped.
    """
    propagators = []
    for name in split_list(value):
        if name not in KNOWN_PROPAGATORS:
            logger.warning(f"Ignoring unknown propagator: {name}")
            continue
        if name not in propagators:
            propagators.append(name)
    return propagators


class Options(object):
    """Holds the settings of the propagation and metrics components"""

    def __init__(self, **kwds: Dict[str, Any]) -> None:
        self.debug = False
        self.log_level = logging.WARNING
        self.log_level_configured = False
        self.propagators = list(KNOWN_PROPAGATORS)
        self.collection_interval = 60.0
        self.config_path = os.environ.get("TRACEWIRE_CONFIG_PATH", None)

        if self.config_path:
            self.set_from_file(self.config_path)

        self.__dict__.update(kwds)
        if "propagators" in kwds:
            self.propagators = parse_propagators(self.propagators)
        if "log_level" in kwds:
            self.log_level = parse_log_level(self.log_level) or logging.WARNING
            self.log_level_configured = True

        self.set_from_env()
        # The package logger is left alone unless a level was asked for.
        if self.log_level_configured:
            set_log_level(self.log_level)

    def set_from_file(self, path: str) -> None:
        """
        Read options from the tracewire section of a YAML file.
        @return: None
        """
        section = ConfigReader(path).section("tracewire")

        level = parse_log_level(section.get("log_level"))
        if level is not None:
            self.log_level = level
            self.log_level_configured = True

        if "propagators" in section:
            self.propagators = parse_propagators(section["propagators"])

        if "collection_interval" in section:
            self.collection_interval = self._parse_interval(
                section["collection_interval"], self.collection_interval
            )

    def set_from_env(self) -> None:
        """
        Read options from the environment, overriding everything else.
        @return: None
        """
        if "TRACEWIRE_LOG_LEVEL" in os.environ:
            level = parse_log_level(os.environ["TRACEWIRE_LOG_LEVEL"])
            if level is None:
                logger.warning(
                    f"Couldn't parse TRACEWIRE_LOG_LEVEL env var: {os.environ['TRACEWIRE_LOG_LEVEL']}"
                )
            else:
                self.log_level = level
                self.log_level_configured = True

        if is_truthy(os.environ.get("TRACEWIRE_DEBUG", None)):
            self.log_level = logging.DEBUG
            self.log_level_configured = True
            self.debug = True

        if "TRACEWIRE_PROPAGATORS" in os.environ:
            self.propagators = parse_propagators(os.environ["TRACEWIRE_PROPAGATORS"])

        if "TRACEWIRE_COLLECTION_INTERVAL" in os.environ:
            self.collection_interval = self._parse_interval(
                os.environ["TRACEWIRE_COLLECTION_INTERVAL"], self.collection_interval
            )

    @staticmethod
    def _parse_interval(value: Any, default: float) -> float:
        try:
            interval = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Couldn't parse collection interval: {value}")
            return default
        if interval <= 0:
            logger.warning(f"Collection interval must be positive: {value}")
            return default
        return interval
