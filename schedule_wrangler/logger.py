"""Logging utilities for Schedule Wrangler."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

WranglerLogger = logging.getLogger("WranglerLogger")


def setup_logging(
    info_log_filename: Optional[Path] = None,
    debug_log_filename: Optional[Path] = None,
    std_out_level: str = "info",
):
    """Sets up the WranglerLogger w.r.t. the log file locations and the console level.

    Called by the `_test_logging` fixture in conftest.py and by the command line scripts. Can be
    called by the user to set up logging for their session. If called multiple times, the logger
    will be reset.

    Args:
        info_log_filename: the location of the log file that will get created to add the INFO log.
            The INFO log is terse, it reports loads, compiles and writes.
            Defaults to file in cwd() `schedule_wrangler_[datetime].info.log`.
        debug_log_filename: the location of the log file that will get created to add the DEBUG
            log. The DEBUG log is noisy and includes per-table counts. If not provided, no debug
            file is written.
        std_out_level: the level of logging to the console. One of "info", "warning", "debug".
            Defaults to "info" but will be set to ERROR if nothing provided matches.
    """
    setup_logging.called = True

    # Clear handles if any exist already
    WranglerLogger.handlers = []

    WranglerLogger.setLevel(logging.DEBUG)

    FORMAT = logging.Formatter(
        "%(asctime)-15s %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S,"
    )
    default_info_f = (
        f"schedule_wrangler_{datetime.now().strftime('%Y_%m_%d__%H_%M_%S')}.info.log"
    )
    info_log_filename = info_log_filename or Path.cwd() / default_info_f

    info_file_handler = logging.FileHandler(Path(info_log_filename))
    info_file_handler.setLevel(logging.INFO)
    info_file_handler.setFormatter(FORMAT)
    WranglerLogger.addHandler(info_file_handler)

    if debug_log_filename:
        debug_log_handler = logging.FileHandler(Path(debug_log_filename))
        debug_log_handler.setLevel(logging.DEBUG)
        debug_log_handler.setFormatter(FORMAT)
        WranglerLogger.addHandler(debug_log_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(FORMAT)
    WranglerLogger.addHandler(console_handler)
    if std_out_level == "debug":
        console_handler.setLevel(logging.DEBUG)
    elif std_out_level == "info":
        console_handler.setLevel(logging.INFO)
    elif std_out_level == "warning":
        console_handler.setLevel(logging.WARNING)
    else:
        console_handler.setLevel(logging.ERROR)
