"""Copying links within a container or between containers."""
from __future__ import annotations

import logging
import warnings
from typing import Optional

import h5py

from .config import resolve_verbose
from .errors import H5ExtraWarning, LinkExistsError, MalformedReferenceError, MissingLinkError
from .linkname import SEP, h5join, h5parent_name, is_subpath
from .resolver import container, h5exists_in, link_name, ref_filename, ref_kind
from .types import H5Ref, RefKind
from .util import verbose_msg

logger = logging.getLogger(__name__)


def h5copy_attrs(from_obj, to_obj, overwrite: bool = True) -> None:
    """Copy all attributes attached to one link onto another link.

    Existing attributes of the target are only replaced if `overwrite` is set.
    """
    trg_attrs = to_obj.attrs
    for k, v in from_obj.attrs.items():
        if k in trg_attrs and not overwrite:
            continue
        trg_attrs[k] = v


def _clear(group: h5py.Group):
    """Remove all children and attributes of a group."""
    for k in list(group.attrs.keys()):
        del group.attrs[k]
    for k in list(group.keys()):
        del group[k]


def _prepare_target(h5fh: h5py.File, to_name: str, overwrite: bool):
    """Make sure the target location is free and its parent group exists."""
    if to_name == SEP:
        root = h5fh["/"]
        if len(root) or len(root.attrs):
            if not overwrite:
                msg = f"Destination object '{to_name}' already exists in '{h5fh.filename}'"
                raise LinkExistsError(msg)
            _clear(root)
        return
    if h5exists_in(h5fh, to_name):
        if not overwrite:
            msg = f"Destination object '{to_name}' already exists in '{h5fh.filename}'"
            raise LinkExistsError(msg)
        del h5fh[to_name]
    h5fh.require_group(h5parent_name(to_name))


def _copy_into(src: h5py.Group, dst: h5py.Group, **kwargs):
    """Copy every child of the source group (with attributes) into the target group."""
    for k in src.keys():
        dst.copy(src[k], k, **kwargs)
    h5copy_attrs(src, dst)


def _copy_same_file(h5fh: h5py.File, from_name: str, to_name: str, overwrite: bool):
    """Duplicate a subtree inside of one container."""
    if is_subpath(to_name, from_name) or is_subpath(from_name, to_name):
        msg = f"Cannot copy '{from_name}' to '{to_name}', one contains the other!"
        raise MalformedReferenceError(msg)
    src = h5fh[from_name]

    # collect the subtree before the target location is touched
    todo = [(from_name, src)]
    nodes = []
    while todo:
        name, obj = todo.pop()
        nodes.append((name, obj))
        if isinstance(obj, h5py.Group):
            todo += [(h5join(name, k), v) for k, v in reversed(list(obj.items()))]

    _prepare_target(h5fh, to_name, overwrite)
    for name, obj in nodes:
        target = to_name + name[len(from_name) :]
        if isinstance(obj, h5py.Dataset):
            h5fh.copy(obj, target)  # data and attributes
        else:
            grp = h5fh.require_group(target)
            h5copy_attrs(obj, grp)


def _copy_other_file(
    src_fh: h5py.File,
    from_name: str,
    dst_fh: h5py.File,
    to_name: str,
    overwrite: bool,
    **kwargs,
):
    """Copy a link into a different container."""
    src = src_fh[from_name]
    if to_name == SEP:
        if not isinstance(src, h5py.Group):
            raise MalformedReferenceError("Cannot copy a dataset onto the container root!")
        _prepare_target(dst_fh, to_name, overwrite)
        _copy_into(src, dst_fh, **kwargs)
        return
    _prepare_target(dst_fh, to_name, overwrite)
    dst_fh.copy(src, to_name, **kwargs)
    # not implied by all copy flags, so done explicitly
    h5copy_attrs(src, dst_fh[to_name])


def h5copy(
    from_ref: H5Ref,
    from_name: Optional[str],
    to_ref: H5Ref,
    to_name: Optional[str],
    overwrite: bool = False,
    verbose: Optional[bool] = None,
    **kwargs,
) -> None:
    """Copy a link to another location, in the same or in a different container.

    Missing parent groups of the destination are created. Attributes of the copied
    link are kept, attributes of its parent groups are not copied.

    Args:
        from_ref: source container path or open handle
        from_name: source link name
        to_ref: destination container path or open handle
        to_name: destination link name
        overwrite: whether to replace an existing destination
        verbose: log progress (default: `options.verbose`)
        kwargs: passed on to `h5py.Group.copy` when copying between containers

    Raises:
        MissingLinkError: if the source does not exist.
        LinkExistsError: if the destination exists and `overwrite` is not set.
    """
    verbose = resolve_verbose(verbose)
    from_path, to_path = link_name(from_ref, from_name), link_name(to_ref, to_name)
    from_file, to_file = ref_filename(from_ref), ref_filename(to_ref)
    verbose_msg(
        logger,
        verbose,
        "h5copy: ",
        "\n  Source file: ", from_file,
        "\n  Destination file: ", to_file,
        "\n  Source name: ", from_path,
        "\n  Destination name: ", to_path,
    )

    if from_file == to_file:
        if from_path == to_path:
            msg = "The source and the destination are identical, nothing to copy."
            warnings.warn(msg, H5ExtraWarning, stacklevel=2)
            return
        # reuse an open handle, a file can not be opened twice in different modes
        ref = to_ref if ref_kind(to_ref) != RefKind.path else from_ref
        with container(ref, "r+") as h5fh:
            if not h5exists_in(h5fh, from_path):
                raise MissingLinkError(f"Cannot copy a non-existing object: {from_path}")
            _copy_same_file(h5fh, from_path, to_path, overwrite)
        return

    with container(from_ref, "r") as src_fh:
        if not h5exists_in(src_fh, from_path):
            raise MissingLinkError(f"Cannot copy a non-existing object: {from_path}")
        with container(to_ref, "a") as dst_fh:
            _copy_other_file(src_fh, from_path, dst_fh, to_path, overwrite, **kwargs)


__all__ = ["h5copy", "h5copy_attrs"]
