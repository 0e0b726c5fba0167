# (c) Copyright IBM Corp. 2025

import logging
import os
import sys

logger = None


def get_standard_logger() -> logging.Logger:
    """
    Retrieves and configures a standard logger for the tracewire package

    @return: Logger
    """
    standard_logger = logging.getLogger("tracewire")

    if not standard_logger.handlers:
        ch = logging.StreamHandler()
        f = logging.Formatter(
            "%(asctime)s: %(process)d %(levelname)s %(name)s: %(message)s"
        )
        ch.setFormatter(f)
        standard_logger.addHandler(ch)
    standard_logger.setLevel(logging.WARNING)
    return standard_logger


def glogging_available() -> bool:
    """
    Determines if the gunicorn.glogging package is available

    @return:  Boolean
    """
    package_check = False

    # Is the glogging package available?
    try:
        from gunicorn import glogging  # noqa: F401
    except ImportError:
        pass
    else:
        package_check = True

    return package_check


def running_in_gunicorn() -> bool:
    """
    Determines if we are running inside of a gunicorn process.

    @return:  Boolean
    """
    process_check = False

    try:
        # Is this a gunicorn process?
        if hasattr(sys, "argv"):
            for arg in sys.argv:
                if arg.find("gunicorn") >= 0:
                    process_check = True
        elif os.path.isfile("/proc/self/cmdline"):
            with open("/proc/self/cmdline") as cmd:
                contents = cmd.read()

            parts = contents.split("\0")
            parts.pop()
            cmdline = " ".join(parts)

            if cmdline.find("gunicorn") >= 0:
                process_check = True

        return process_check
    except Exception:
        logging.getLogger("tracewire").debug(
            "tracewire.log.running_in_gunicorn: ", exc_info=True
        )
        return False


def set_log_level(level: int) -> None:
    """
    Applies the configured level to the package logger.

    @param level: a logging level such as logging.DEBUG
    """
    logger.setLevel(level)


if running_in_gunicorn() and glogging_available():
    logger = logging.getLogger("gunicorn.error")
else:
    logger = get_standard_logger()
