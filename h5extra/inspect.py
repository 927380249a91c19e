"""Existence checks, classification, dimensions and listing of container links."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

import h5py
import pandas

from .errors import MalformedReferenceError
from .linkname import h5join, h5rel_name
from .resolver import (
    container,
    h5exists_in,
    is_void_name,
    link_name,
    opened,
    ref_kind,
)
from .types import H5Ref, LinkKind, RefKind, node_kind

DETAIL_COLUMNS = ["name", "kind", "shape", "maxshape", "dtype", "n_attrs"]
"""Columns of the table returned by `h5list(..., detailed=True)`."""


def h5exists(ref: H5Ref, name: Optional[str] = None) -> bool:
    """Check whether a link exists.

    Never fails for missing files or links, or for paths leading through a dataset.
    The name `.` never exists, an empty name is the root for paths and files,
    but does not exist for sub-scope handles.

    Raises:
        MalformedReferenceError: if `/` is addressed through a sub-scope handle.
    """
    if is_void_name(ref, name):
        return False
    target = link_name(ref, name)
    if ref_kind(ref) != RefKind.path:
        return h5exists_in(ref.file, target)
    try:
        with container(ref, "r") as h5fh:
            return h5exists_in(h5fh, target)
    except (OSError, ValueError):
        # missing, unreadable or not a HDF5 file
        return False


def h5class(ref: H5Ref, name: Optional[str] = None) -> LinkKind:
    """Return the kind of a link (root, group or dataset)."""
    with opened(ref, name) as obj:
        return node_kind(obj)


def is_h5group(ref: H5Ref, name: Optional[str] = None) -> bool:
    """Return whether the link is a group (the root is not counted as a group)."""
    return h5class(ref, name) == LinkKind.group


def is_h5dataset(ref: H5Ref, name: Optional[str] = None) -> bool:
    """Return whether the link is a dataset."""
    return h5class(ref, name) == LinkKind.dataset


def _expect_dataset(obj) -> h5py.Dataset:
    if not isinstance(obj, h5py.Dataset):
        msg = f"'{obj.name}' in '{obj.file.filename}' is not a dataset!"
        raise MalformedReferenceError(msg)
    return obj


def h5dims(ref: H5Ref, name: Optional[str] = None) -> Tuple[int, ...]:
    """Return the shape of a dataset."""
    with opened(ref, name) as obj:
        return tuple(_expect_dataset(obj).shape)


def h5maxdims(ref: H5Ref, name: Optional[str] = None) -> Tuple[Optional[int], ...]:
    """Return the maximal shape of a dataset (`None` for unlimited dimensions)."""
    with opened(ref, name) as obj:
        return tuple(_expect_dataset(obj).maxshape)


def _walk(group: h5py.Group, recursive: bool):
    """Yield (absolute name, object) of descendants in depth-first pre-order.

    Children follow the native iteration order of their group.
    """
    stack = [(h5join(group.name, k), v) for k, v in reversed(list(group.items()))]
    while stack:
        name, obj = stack.pop()
        yield name, obj
        if recursive and isinstance(obj, h5py.Group):
            stack += [(h5join(name, k), v) for k, v in reversed(list(obj.items()))]


def _details(name: str, obj) -> Dict[str, Any]:
    is_ds = isinstance(obj, h5py.Dataset)
    return {
        "name": name,
        "kind": node_kind(obj),
        "shape": tuple(obj.shape) if is_ds else None,
        "maxshape": tuple(obj.maxshape) if is_ds else None,
        "dtype": str(obj.dtype) if is_ds else None,
        "n_attrs": len(obj.attrs),
    }


def h5list(
    ref: H5Ref,
    name: Optional[str] = None,
    recursive: bool = False,
    full_names: bool = False,
    detailed: bool = False,
) -> Union[List[str], pandas.DataFrame]:
    """List the links inside of a group.

    Args:
        ref: container path or an open file, group or dataset
        name: group to list (default: root, or the location of a sub-scope handle)
        recursive: whether to list all descendants instead of only the children
        full_names: whether to return absolute names instead of relative ones
        detailed: whether to return a table (see `DETAIL_COLUMNS`) instead of names

    Raises:
        MalformedReferenceError: if the target is a dataset.
    """
    with opened(ref, name) as obj:
        if not isinstance(obj, h5py.Group):
            msg = f"Cannot list '{obj.name}' in '{obj.file.filename}', it is a dataset!"
            raise MalformedReferenceError(msg)

        base = obj.name
        rows = []
        for path, child in _walk(obj, recursive):
            shown = path if full_names else h5rel_name(path, base)
            rows.append(_details(shown, child) if detailed else shown)

    if detailed:
        return pandas.DataFrame(rows, columns=DETAIL_COLUMNS)
    return rows


def h5attrs(ref: H5Ref, name: Optional[str] = None) -> Dict[str, Any]:
    """Return the attributes of a link as a dict."""
    with opened(ref, name) as obj:
        return dict(obj.attrs.items())


def h5attr_names(ref: H5Ref, name: Optional[str] = None) -> List[str]:
    """Return the attribute keys of a link."""
    with opened(ref, name) as obj:
        return list(obj.attrs.keys())
