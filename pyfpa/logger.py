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

"""Logging configuration for FP_A decoding"""

import logging
import sys
from enum import Enum
from typing import Optional

DEFAULT_LOGGER = "pyfpa"


class LogLevel(Enum):
    """Log levels for the decoder"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def _level(level: str) -> int:
    return getattr(LogLevel, level.upper()).value


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

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
        levelname = record.levelname
        color = self.COLORS.get(levelname, self.RESET)
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logger(name: str = DEFAULT_LOGGER,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(level))
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(_level(level))
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(_level(level))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = DEFAULT_LOGGER) -> logging.Logger:
    """Get logger by name"""
    return logging.getLogger(name)


SENSOR_LOGGER = f"{DEFAULT_LOGGER}.sensor"

# Loggers of the decoding pipeline by stage name
STAGE_LOGGERS = {
    'decoder': f"{DEFAULT_LOGGER}.messages.registry",
    'reader': f"{DEFAULT_LOGGER}.io.fpa_reader",
    'sensor': SENSOR_LOGGER,
}


def log_sensor_text(record, logger: Optional[logging.Logger] = None):
    """Forward a decoded TEXT message to Python logging at its own level"""
    logger = logger or logging.getLogger(SENSOR_LOGGER)
    logger.log(record.log_level, "[%s] %s", record.level, record.text)


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup the package logger and per-stage levels from a dictionary

    Stage loggers propagate to the package logger, whose handlers are opened
    at the most verbose level requested.

    Example config:
    {
        'level': 'INFO',
        'log_file': 'fpa.log',
        'console': True,
        'stages': {
            'decoder': 'TRACE',
            'reader': 'WARNING'
        }
    }
    """
    base_level = _level(config.get('level', 'INFO'))
    stage_levels = {}
    for stage, level in config.get('stages', {}).items():
        if stage not in STAGE_LOGGERS:
            raise ValueError(f"Unknown logging stage: {stage!r}")
        stage_levels[stage] = _level(level)

    handler_level = min([base_level, *stage_levels.values()])
    logger = setup_logger(DEFAULT_LOGGER, logging.getLevelName(handler_level),
                          config.get('log_file'), config.get('console', True))
    logger.setLevel(base_level)

    for stage, level in stage_levels.items():
        logging.getLogger(STAGE_LOGGERS[stage]).setLevel(level)
    return logger
