"""Safe link management for HDF5 containers.

Most functions accept a *reference* to a container location, which is either
the path of a HDF5 file, an open `h5py.File`, or an open `h5py.Group` / `h5py.Dataset`
(sub-scope handle, names are resolved relative to it unless they start with `/`).

```python
from h5extra import h5backup, h5copy, h5exists, h5move, h5overwrite

h5copy("pbmc.h5ad", "obsm/tsne", "other.h5ad", "obsm/tsne")
h5move("other.h5ad", "obsm", "obsm_old")
h5overwrite("pbmc.h5ad", "layers", True)
assert not h5exists("pbmc.h5ad", "layers")
```
"""
import importlib_metadata
from typing_extensions import Final

from .backup import h5backup, h5overwrite
from .config import H5ExtraOptions, get_options, local_options, set_options
from .copy import h5copy, h5copy_attrs
from .errors import (
    H5ExtraError,
    H5ExtraWarning,
    LinkExistsError,
    MalformedReferenceError,
    MissingLinkError,
    OpenTimeoutError,
)
from .inspect import (
    h5attr_names,
    h5attrs,
    h5class,
    h5dims,
    h5exists,
    h5list,
    h5maxdims,
    is_h5dataset,
    is_h5group,
)
from .linkname import h5abs_name
from .links import h5create_group, h5delete, h5move
from .opener import h5create_file, h5try_open
from .resolver import h5open, link_name, ref_kind
from .types import LinkKind, OpenMode, RefKind

__version__: Final[str] = importlib_metadata.version(__package__ or __name__)

__all__ = [
    "h5abs_name",
    "h5try_open",
    "h5create_file",
    "h5open",
    "link_name",
    "ref_kind",
    "h5exists",
    "h5class",
    "is_h5group",
    "is_h5dataset",
    "h5dims",
    "h5maxdims",
    "h5list",
    "h5attrs",
    "h5attr_names",
    "h5copy",
    "h5copy_attrs",
    "h5move",
    "h5delete",
    "h5create_group",
    "h5backup",
    "h5overwrite",
    "H5ExtraOptions",
    "get_options",
    "set_options",
    "local_options",
    "LinkKind",
    "OpenMode",
    "RefKind",
    "H5ExtraError",
    "H5ExtraWarning",
    "LinkExistsError",
    "MalformedReferenceError",
    "MissingLinkError",
    "OpenTimeoutError",
]
