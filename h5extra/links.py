"""Moving, deleting and creating links inside a container."""
from __future__ import annotations

import logging
import warnings
from typing import Optional

import h5py

from .config import resolve_verbose
from .errors import H5ExtraWarning, LinkExistsError, MalformedReferenceError, MissingLinkError
from .linkname import SEP, h5parent_name, is_subpath
from .resolver import container, h5exists_in, is_void_name, link_name
from .types import H5Ref
from .util import verbose_msg

logger = logging.getLogger(__name__)


def h5create_group(ref: H5Ref, name: str, show_warnings: bool = True) -> str:
    """Create a group, including all missing parent groups.

    Returns the absolute name of the group.

    Raises:
        LinkExistsError: if a dataset is in the way.
    """
    target = link_name(ref, name)
    with container(ref, "a") as h5fh:
        # walk down to find the first missing group
        node = h5fh["/"]
        for seg in [s for s in target.split(SEP) if s]:
            if seg not in node:
                node.create_group(target)
                return target
            node = node[seg]
            if not isinstance(node, h5py.Group):
                msg = f"Cannot create group '{target}', '{node.name}' is a dataset!"
                raise LinkExistsError(msg)
    if show_warnings:
        warnings.warn(f"Group '{target}' already exists.", H5ExtraWarning, stacklevel=2)
    return target


def h5delete(ref: H5Ref, name: Optional[str], verbose: Optional[bool] = None) -> None:
    """Delete a link.

    Deleting a link that does not exist only issues a warning.

    Raises:
        MalformedReferenceError: if the root is to be deleted.
    """
    verbose = resolve_verbose(verbose)
    if is_void_name(ref, name):
        msg = f"The object '{name}' to be deleted doesn't exist."
        warnings.warn(msg, H5ExtraWarning, stacklevel=2)
        return
    target = link_name(ref, name)
    if target == SEP:
        raise MalformedReferenceError("Cannot delete the container root '/'!")

    with container(ref, "r+") as h5fh:
        if not h5exists_in(h5fh, target):
            msg = f"The object '{target}' to be deleted doesn't exist."
            warnings.warn(msg, H5ExtraWarning, stacklevel=2)
            return
        verbose_msg(logger, verbose, "Deleting '", target, "' from '", h5fh.filename, "'")
        del h5fh[target]


def h5move(
    ref: H5Ref,
    from_name: Optional[str],
    to_name: Optional[str],
    overwrite: bool = False,
    verbose: Optional[bool] = None,
) -> None:
    """Move a link to another location inside the same container.

    The move is a single rename of the link, so the moved object
    keeps its data and attributes.

    Args:
        ref: container path or open handle
        from_name: name of the source link
        to_name: name of the destination link
        overwrite: whether to replace an existing destination
        verbose: log progress (default: `options.verbose`)

    Raises:
        MissingLinkError: if the source does not exist.
        MalformedReferenceError: if a name is the root, or one name contains the other.

    An identical source and destination, or an existing destination without
    `overwrite` set, only issue a warning and leave the container unchanged.
    """
    verbose = resolve_verbose(verbose)
    from_path, to_path = link_name(ref, from_name), link_name(ref, to_name)
    verbose_msg(
        logger,
        verbose,
        "h5move: ",
        "\n  File: ", ref,
        "\n  Source name: ", from_path,
        "\n  Destination name: ", to_path,
    )
    if from_path == to_path:
        msg = "The source name and the destination name are identical."
        warnings.warn(msg, H5ExtraWarning, stacklevel=2)
        return

    with container(ref, "r+") as h5fh:
        if SEP in (from_path, to_path):
            raise MalformedReferenceError("Cannot move from or onto the container root!")
        if is_subpath(to_path, from_path) or is_subpath(from_path, to_path):
            msg = f"Cannot move '{from_path}' to '{to_path}', one contains the other!"
            raise MalformedReferenceError(msg)
        if not h5exists_in(h5fh, from_path):
            raise MissingLinkError(f"Cannot move a non-existing object: {from_path}")
        if h5exists_in(h5fh, to_path):
            if not overwrite:
                msg = "Destination object already exists. Set 'overwrite=True' to remove it."
                warnings.warn(msg, H5ExtraWarning, stacklevel=2)
                return
            verbose_msg(logger, verbose, "Destination object already exists, removing it.")
            del h5fh[to_path]
        h5fh.require_group(h5parent_name(to_path))
        h5fh.move(from_path, to_path)
