"""CLI entrypoint: Typer app definition and command registration"""

import typer

from drivepress.cli.commands import build_cmd, inspect_cmd


app = typer.Typer(name="drivepress", no_args_is_help=True, help="Build a static article site from markdown in a Drive folder")

app.command(name="build")(build_cmd)
app.command(name="inspect")(inspect_cmd)
