"""h5extra CLI for inspecting and rearranging HDF5 containers."""
import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from .. import config
from . import general, links

app = typer.Typer()
app.add_typer(general.app, name="self")
app.add_typer(links.app, name="link")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress."),
    timeout: Optional[float] = typer.Option(None, help="Seconds to retry opening files."),
    interval: Optional[float] = typer.Option(None, help="Seconds between retries."),
):
    """Inspect and rearrange links in HDF5 containers."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    opts = {"verbose": verbose}
    if timeout is not None:
        opts["open_timeout"] = timeout
    if interval is not None:
        opts["open_interval"] = interval
    config.set_options(**opts)
