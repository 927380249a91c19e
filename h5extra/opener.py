"""Opening containers, with optional retrying for files locked by another process."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Union

import h5py

from . import config
from .errors import OpenTimeoutError
from .types import OPEN_MODES, READ_MODES, OpenMode

logger = logging.getLogger(__name__)


def _check_mode(mode: str):
    if mode not in OPEN_MODES:
        raise ValueError(f"Unknown file open mode: {mode}")


def h5try_open(
    filename: Union[str, Path],
    mode: OpenMode = "a",
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
    **kwargs,
) -> h5py.File:
    """Open a HDF5 file, retrying on failure until a timeout is reached.

    Containers on shared storage might be locked by another process for a moment,
    retrying avoids failing in that case without risking an infinite hang.

    Args:
        filename: path of the HDF5 file
        mode: how to open it (see `OpenMode`)
        timeout: total seconds to keep retrying (default: `options.open_timeout`)
        interval: seconds to wait between attempts (default: `options.open_interval`)
        kwargs: passed on to `h5py.File`

    Returns:
        The opened file.

    Raises:
        FileNotFoundError: if opening for reading and the file does not exist.
        OpenTimeoutError: if the file could not be opened before the timeout.
            This is not meant to be caught, the process should not go on.

    If `timeout` or `interval` is not positive, no retry is done and the error
    of the failed attempt is raised directly.
    """
    _check_mode(mode)
    opts = config.options
    timeout = opts.open_timeout if timeout is None else timeout
    interval = opts.open_interval if interval is None else interval
    do_retry = timeout > 0 and interval > 0

    if mode in READ_MODES:
        # absolute, so a later change of working directory does not break the handle
        filename = Path(filename).resolve(strict=True)

    try:
        return h5py.File(filename, mode, **kwargs)
    except Exception as e:
        logger.warning("Open file '%s' failed: %s", filename, e)
        if not do_retry:
            raise
        last_err = e

    logger.warning("Keep retrying every %s s with timeout set to %s s", interval, timeout)
    waited = 0.0
    while waited < timeout:
        time.sleep(interval)
        waited += interval
        try:
            return h5py.File(filename, mode, **kwargs)
        except Exception as e:
            logger.debug("Retry to open '%s' failed: %s", filename, e)
            last_err = e
    msg = f"Reached a timeout after {waited} s. Cannot open '{filename}'"
    raise OpenTimeoutError(msg) from last_err


def h5create_file(filename: Union[str, Path]) -> Path:
    """Create a new empty HDF5 file, failing if it already exists.

    Returns the absolute path of the new file.
    """
    with h5try_open(filename, "x"):
        pass
    return Path(filename).resolve()
