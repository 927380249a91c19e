"""
Syntactic transformations of HDF5 link names.

All functions here are pure, they never touch a container.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from typing_extensions import Final

SEP: Final[str] = "/"
"""Separator of link name segments (and name of the container root)."""

_SEP_RUN = re.compile(r"/+")


def _is_valid(name: str) -> bool:
    """Return whether a name contains at least one printable, non-blank character."""
    return any(c.isprintable() and not c.isspace() for c in name)


def h5abs_name(name: Optional[str]) -> str:
    """Format an absolute path name for a HDF5 link.

    Missing, empty or all-invalid names map to the root `/`.
    Runs of separators are collapsed and a trailing separator is removed.

    Examples:
        >>> h5abs_name("ggg///ddd/")
        '/ggg/ddd'
        >>> h5abs_name(None)
        '/'
    """
    if not isinstance(name, str) or not _is_valid(name):
        return SEP
    name = _SEP_RUN.sub(SEP, SEP + name)
    if len(name) > 1 and name.endswith(SEP):
        name = name[:-1]
    return name


def is_abs_name(name: Optional[str]) -> bool:
    """Return whether a raw (unnormalized) name is written as an absolute path."""
    return isinstance(name, str) and name.startswith(SEP)


def h5parent_name(name: str) -> str:
    """Return the normalized name of the parent group (the root is its own parent)."""
    name = h5abs_name(name)
    return name.rsplit(SEP, 1)[0] or SEP


def h5base_name(name: str) -> str:
    """Return the last segment of a name (empty for the root)."""
    return h5abs_name(name).rsplit(SEP, 1)[1]


def h5join(base: str, name: str) -> str:
    """Append a relative name to an absolute base name."""
    return h5abs_name(f"{base}{SEP}{name}")


def h5rel_name(name: str, base: str) -> str:
    """Return `name` relative to `base`, where `base` must be an ancestor or `name` itself."""
    name, base = h5abs_name(name), h5abs_name(base)
    if not is_subpath(name, base):
        raise ValueError(f"'{name}' is not located below '{base}'!")
    if base == SEP:
        return name[1:]
    return name[len(base) + 1 :]


def is_subpath(name: str, prefix: str) -> bool:
    """Return whether `prefix` is `name` itself or one of its ancestors.

    The check is done on whole path segments, i.e. `/obs` covers
    `/obs/a`, but does not cover `/obs2`.
    """
    name, prefix = h5abs_name(name), h5abs_name(prefix)
    if prefix == SEP or name == prefix:
        return True
    return name.startswith(prefix + SEP)


def exclude_names(names: Iterable[str], exclude: Iterable[str]) -> List[str]:
    """Return names not covered by any of the excluded names (keeping the order)."""
    excl = [h5abs_name(e) for e in exclude]
    return [n for n in names if not any(is_subpath(n, e) for e in excl)]


__all__ = [
    "h5abs_name",
    "h5parent_name",
    "h5base_name",
    "h5join",
    "h5rel_name",
    "is_abs_name",
    "is_subpath",
    "exclude_names",
]
