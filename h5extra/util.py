"""Small helpers used across the package."""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import BinaryIO, Union

_hash_alg = {
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}
"""Supported hashsum algorithms."""

DEF_HASH_ALG = "sha256"


def hashsum(data: BinaryIO, alg: str = DEF_HASH_ALG) -> str:
    """Compute hashsum from given binary file stream using selected algorithm."""
    try:
        h = _hash_alg[alg]()
    except KeyError:
        raise ValueError(f"Unsupported hashsum: {alg}")

    while True:
        chunk = data.read(h.block_size * 1024)
        if not chunk:
            break
        h.update(chunk)
    return h.hexdigest()


def file_hashsum(path: Union[str, Path], alg: str = DEF_HASH_ALG) -> str:
    """Return hashsum of a file, prefixed with the algorithm (e.g. `sha256:...`)."""
    with open(path, "rb") as f:
        return f"{alg}:{hashsum(f, alg)}"


def verbose_msg(logger: logging.Logger, verbose: bool, *parts) -> None:
    """Log a progress message assembled from parts, if verbose."""
    if verbose:
        logger.info("".join(map(str, parts)))
