"""Commands operating on links inside of containers."""
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.table import Table

from ..backup import h5backup, h5overwrite
from ..copy import h5copy
from ..inspect import DETAIL_COLUMNS, h5list
from ..links import h5delete, h5move
from ..util import file_hashsum

app = typer.Typer()


@app.command("ls")
def ls(
    file: Path,
    name: str = typer.Argument("/", help="Group to list."),
    recursive: bool = typer.Option(False, "--recursive", "-r"),
    full_names: bool = typer.Option(False, "--full-names", "-f"),
    detailed: bool = typer.Option(False, "--detailed", "-l"),
):
    """List the links inside of a group."""
    res = h5list(file, name, recursive=recursive, full_names=full_names, detailed=detailed)
    if not detailed:
        for n in res:
            print(n)
        return

    table = Table(*DETAIL_COLUMNS)
    for row in res.to_dict("records"):
        row["kind"] = row["kind"].value
        table.add_row(*(str(row[c]) if row[c] is not None else "" for c in DETAIL_COLUMNS))
    print(table)


@app.command("cp")
def cp(
    from_file: Path,
    from_name: str,
    to_file: Path,
    to_name: Optional[str] = typer.Argument(None, help="Default: same as source name."),
    overwrite: bool = typer.Option(False, "--overwrite"),
):
    """Copy a link, possibly into another container."""
    h5copy(from_file, from_name, to_file, to_name or from_name, overwrite=overwrite)


@app.command("mv")
def mv(
    file: Path,
    from_name: str,
    to_name: str,
    overwrite: bool = typer.Option(False, "--overwrite"),
):
    """Move a link inside of a container."""
    h5move(file, from_name, to_name, overwrite=overwrite)


@app.command("rm")
def rm(
    file: Path,
    names: List[str],
    rewrite: bool = typer.Option(
        False, "--rewrite", help="Rebuild the file without the links (frees space)."
    ),
):
    """Delete links from a container."""
    for name in names:
        if rewrite:
            h5overwrite(file, name, True)
        else:
            h5delete(file, name)


@app.command("backup")
def backup(
    from_file: Path,
    to_file: Optional[Path] = typer.Argument(None),
    exclude: List[str] = typer.Option([], "--exclude", "-e", help="Link to leave out."),
    overwrite: bool = typer.Option(False, "--overwrite"),
):
    """Back up a container, optionally leaving out some links."""
    print(h5backup(from_file, to_file, exclude=exclude, overwrite=overwrite))


@app.command("stat")
def stat(file: Path):
    """Show size, checksum and number of groups and datasets of a container."""
    links = h5list(file, recursive=True, full_names=True, detailed=True)
    counts = links["kind"].map(lambda k: k.value).value_counts()
    print(f"[b]File:[/b] {file.resolve()}")
    print(f"[b]Size:[/b] {file.stat().st_size} bytes")
    print(f"[b]Checksum:[/b] {file_hashsum(file)}")
    print(f"[b]Groups:[/b] {counts.get('group', 0)}")
    print(f"[b]Datasets:[/b] {counts.get('dataset', 0)}")
