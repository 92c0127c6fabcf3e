# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for the positioning pipeline

Every module logs through ``logging.getLogger(__name__)``, so the whole
package sits under the ``pypvt`` logger hierarchy. This module only wires
handlers and levels onto that hierarchy.
"""

import copy
import logging
import sys
from enum import Enum
from typing import Optional, Union

from .core.errors import ConfigurationError

ROOT_LOGGER = "pypvt"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LogLevel(Enum):
    """Log levels, with an extra TRACE level below DEBUG"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, level: Union[str, int, 'LogLevel']) -> int:
        """Numeric level from a name, a number or a LogLevel"""
        if isinstance(level, LogLevel):
            return level.value
        if isinstance(level, int):
            return level
        try:
            return cls[str(level).upper()].value
        except KeyError:
            raise ConfigurationError(f"unknown log level: {level}") from None


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def trace(self, message, *args, **kwargs):
    """Logger.trace, for per-sample chatter"""
    if self.isEnabledFor(LogLevel.TRACE.value):
        self._log(LogLevel.TRACE.value, message, args, **kwargs)


logging.Logger.trace = trace


class ColoredFormatter(logging.Formatter):
    """Console formatter coloring the level name"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # other handlers share the record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: Union[str, int] = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Attach console and/or file handlers to a logger

    Parameters:
    -----------
    name : str
        Logger name, ``pypvt`` or one of its submodules
    level : str or int
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable colored console output

    Returns:
    --------
    logging.Logger
        Configured logger. Existing handlers are replaced.
    """
    numeric = LogLevel.parse(level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    # module loggers below ``name`` propagate here, not to the root logger
    if name == ROOT_LOGGER and logger.handlers:
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package hierarchy ("satellite.ephemeris" -> "pypvt.satellite.ephemeris")"""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level change

    >>> with LogContext(get_logger("satellite.ephemeris"), "DEBUG"):
    ...     store.advance(now)
    """

    def __init__(self, logger: logging.Logger, level: Union[str, int]):
        self.logger = logger
        self.new_level = LogLevel.parse(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


class LoggerConfig:
    """Per-module log levels on top of a package default"""

    def __init__(self):
        self.module_levels = {}
        self.default_level = "INFO"
        self.log_file = None
        self.console = True

    def set_module_level(self, module_name: str, level: Union[str, int]):
        """Set the level of one module, e.g. ``positioning.aggregator``"""
        LogLevel.parse(level)
        self.module_levels[module_name] = level

    def get_level_for_module(self, module_name: str) -> Union[str, int]:
        return self.module_levels.get(module_name, self.default_level)

    def configure_from_dict(self, config: dict):
        """Read ``default_level``, ``log_file``, ``console`` and ``module_levels``"""
        unknown = set(config) - {'default_level', 'log_file', 'console', 'module_levels'}
        if unknown:
            raise ConfigurationError(f"unknown logging option(s): {sorted(unknown)}")

        if 'default_level' in config:
            LogLevel.parse(config['default_level'])
            self.default_level = config['default_level']
        if 'log_file' in config:
            self.log_file = config['log_file']
        if 'console' in config:
            self.console = bool(config['console'])
        for module, level in (config.get('module_levels') or {}).items():
            self.set_module_level(module, level)

    def setup_all_loggers(self) -> logging.Logger:
        """Install handlers on the package logger and levels on module loggers"""
        root = setup_logger(ROOT_LOGGER, self.default_level, self.log_file, self.console)

        # Handlers live on the package logger only, so lowering a module
        # level also requires the handlers to let those records through.
        lowest = min([LogLevel.parse(self.default_level)]
                     + [LogLevel.parse(level) for level in self.module_levels.values()])
        for handler in root.handlers:
            handler.setLevel(lowest)

        for module, level in self.module_levels.items():
            get_logger(module).setLevel(LogLevel.parse(level))
        return root


# Global logger configuration
logger_config = LoggerConfig()


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup loggers from configuration dictionary

    Example config:
    {
        'default_level': 'INFO',
        'log_file': 'pvt.log',
        'console': True,
        'module_levels': {
            'satellite.ephemeris': 'DEBUG',
            'positioning.aggregator': 'TRACE',
        }
    }
    """
    logger_config.configure_from_dict(config)
    return logger_config.setup_all_loggers()
