"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdblocks.cli.commands import (
    create_cmd, init_cmd, list_cmd, read_cmd, render_cmd, search_cmd, transpile_cmd, update_cmd,
)


app = typer.Typer(name="mdblocks", no_args_is_help=True, help="Markdown to content blocks, with policy-based document updates")

app.command(name="transpile")(transpile_cmd)
app.command(name="render")(render_cmd)
app.command(name="init")(init_cmd)
app.command(name="create")(create_cmd)
app.command(name="update")(update_cmd)
app.command(name="read")(read_cmd)
app.command(name="list")(list_cmd)
app.command(name="search")(search_cmd)
