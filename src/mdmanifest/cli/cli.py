"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdmanifest.cli.commands import (
    build_cmd,
    doc_cmd,
    docs_cmd,
    group_cmd,
    structure_cmd,
    tasks_cmd,
)


app = typer.Typer(name="mdmanifest", no_args_is_help=True, help="Markdown workspace manifest builder")

app.command(name="build")(build_cmd)
app.command(name="docs")(docs_cmd)
app.command(name="doc")(doc_cmd)
app.command(name="tasks")(tasks_cmd)
app.command(name="group")(group_cmd)
app.command(name="structure")(structure_cmd)
