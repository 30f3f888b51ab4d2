#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from colorama import init, Fore, Style
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
import sys

from cognito_srp.utils.ConfigLoader import ConfigLoader

init()


class DebugColorLevel(Enum):
    SUCCESS = Fore.GREEN + Style.BRIGHT
    INFO = Fore.BLUE + Style.BRIGHT
    WARNING = Fore.YELLOW + Style.BRIGHT
    ERROR = Fore.RED + Style.BRIGHT
    DEBUG = Fore.CYAN + Style.BRIGHT


class DebugLevel(IntEnum):
    NONE = 0x00
    SUCCESS = 0x01
    INFO = 0x02
    WARNING = 0x08
    ERROR = 0x10
    DEBUG = 0x20
    ALL = 0xff


LEVEL_MAP = {
    'None': DebugLevel.NONE,
    'Success': DebugLevel.SUCCESS,
    'Information': DebugLevel.INFO,
    'Warning': DebugLevel.WARNING,
    'Error': DebugLevel.ERROR,
    'Debug': DebugLevel.DEBUG,
    'All': DebugLevel.ALL,
}


class Logger:
    """Unified colored console logger + optional file logger."""

    # set_level() overrides the console mask from the config
    _override_mask = None

    @staticmethod
    def _logging_config() -> dict:
        return ConfigLoader.get_config().get('Logging') or {}

    @staticmethod
    def _get_logging_mask(levels):
        mask = DebugLevel.NONE
        for level in levels:
            level = level.strip()
            if level in LEVEL_MAP:
                mask |= LEVEL_MAP[level]

        return mask

    @staticmethod
    def set_level(levels):
        """
        Override console levels at runtime, e.g. "All", "None" or "Warning, Error".
        Passing None restores the configured levels.
        """
        if levels is None:
            Logger._override_mask = None
            return
        Logger._override_mask = Logger._get_logging_mask(str(levels).split(','))

    @staticmethod
    def _should_log(level: DebugLevel):
        if Logger._override_mask is not None:
            mask = Logger._override_mask
        else:
            levels = str(Logger._logging_config().get('logging_levels', 'All')).split(',')
            mask = Logger._get_logging_mask(levels)
        return (mask & level) != 0

    @staticmethod
    def _should_log_file(level: DebugLevel):
        cfg = Logger._logging_config()
        if not cfg.get('log_file'):
            return False
        levels = str(cfg.get('logging_file_levels', 'All')).split(',')
        mask = Logger._get_logging_mask(levels)
        return (mask & level) != 0

    @staticmethod
    def _date():
        return datetime.now().strftime(Logger._logging_config().get('date_format', ' %H:%M:%S'))

    @staticmethod
    def _colorize(label, color, msg):
        if label:
            return f"{color.value}{label}{Style.RESET_ALL}{Logger._date()} {msg}"
        return msg

    @staticmethod
    def _log_path() -> Path:
        cfg = Logger._logging_config()
        return Path(cfg.get('log_dir') or 'logs') / cfg['log_file']

    @staticmethod
    def add_to_log(msg, level_tag):
        if level_tag:
            line = f"[{level_tag}]{Logger._date()} {msg}"
        else:
            line = msg

        path = Logger._log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding='utf-8', errors='replace') as log:
            log.write(line + "\n")

    @staticmethod
    def reset_log():
        if not Logger._logging_config().get('log_file'):
            return
        path = Logger._log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        open(path, "w").close()

    # ===================================================================
    # Console + File logging methods
    # ===================================================================

    @staticmethod
    def _emit(level: DebugLevel, color: DebugColorLevel, tag: str, msg):
        if Logger._should_log(level):
            print(Logger._colorize(f"[{tag}]", color, msg), file=sys.stderr)
        if Logger._should_log_file(level):
            Logger.add_to_log(msg, tag)

    @staticmethod
    def debug(msg):
        Logger._emit(DebugLevel.DEBUG, DebugColorLevel.DEBUG, "DEBUG", msg)

    @staticmethod
    def info(msg):
        Logger._emit(DebugLevel.INFO, DebugColorLevel.INFO, "INFO", msg)

    @staticmethod
    def warning(msg):
        Logger._emit(DebugLevel.WARNING, DebugColorLevel.WARNING, "WARNING", msg)

    @staticmethod
    def error(msg):
        Logger._emit(DebugLevel.ERROR, DebugColorLevel.ERROR, "ERROR", msg)

    @staticmethod
    def success(msg):
        Logger._emit(DebugLevel.SUCCESS, DebugColorLevel.SUCCESS, "SUCCESS", msg)
