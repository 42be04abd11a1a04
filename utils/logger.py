# utils/logger.py
import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV = "MLP_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = []


def resolve_level(level=None):
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    return level


def get_logger(name=__name__, level=None, logfile=None):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # already configured

    logger.setLevel(resolve_level(level))
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if logfile:
        attach_logfile(logger, logfile)

    _configured.append(logger)
    return logger


def attach_logfile(logger, logfile):
    path = os.path.abspath(logfile)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return handler
    log_dir = Path(logfile).parent
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(logfile)
    fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(fh)
    return fh


def detach_logfiles(logger):
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()


def configure_all(level=None, logfile=None):
    """
    Re-level every logger handed out by get_logger and point them all at one
    log file, replacing the file of any previous run. Used by the driver after
    argument parsing.
    """
    level = resolve_level(level)
    for logger in _configured:
        logger.setLevel(level)
        detach_logfiles(logger)
        if logfile:
            attach_logfile(logger, logfile)
