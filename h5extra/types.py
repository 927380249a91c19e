"""Types shared by the h5extra modules."""
from __future__ import annotations

import os
from enum import Enum
from typing import Union, get_args

import h5py
from typing_extensions import Literal, TypeAlias

OpenMode = Literal["a", "r", "r+", "w", "w-", "x"]
"""Container open modes, with the same semantics as for h5py.File.

* `a` creates a new file or opens an existing one for read/write
* `r` opens an existing file for reading
* `r+` opens an existing file for read/write
* `w` creates a file, truncating any existing one
* `w-` and `x` are synonyms, creating a file and failing if it already exists
"""

OPEN_MODES = list(get_args(OpenMode))

READ_MODES = ("r", "r+")
"""Modes that require an existing file."""


H5Handle: TypeAlias = Union[h5py.File, h5py.Group, h5py.Dataset]
"""An open h5py object (the file itself, a group or a dataset)."""

H5Ref: TypeAlias = Union[str, "os.PathLike[str]", H5Handle]
"""Anything that can be used to refer to a location in a container."""


class LinkKind(str, Enum):
    """Kind of a link in a container."""

    root = "root"
    group = "group"
    dataset = "dataset"

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.value}"


class RefKind(Enum):
    """The different ways a caller can reference a location in a container.

    A `path` must be opened first, a `file` handle addresses the container root,
    `group` and `dataset` handles are sub-scope handles bound to a location.
    """

    path = "path"
    file = "file"
    group = "group"
    dataset = "dataset"


def node_kind(node: H5Handle) -> LinkKind:
    """Return the link kind of an open h5py object."""
    if isinstance(node, h5py.Dataset):
        return LinkKind.dataset
    if isinstance(node, h5py.Group):
        return LinkKind.root if node.name == "/" else LinkKind.group
    raise TypeError(f"Not a group or dataset: {node!r}")
