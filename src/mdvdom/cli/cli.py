"""CLI entrypoint: Typer app definition and command registration"""

import logging

import typer

from mdvdom.cli.commands import ast_cmd, render_cmd


app = typer.Typer(name="mdvdom", no_args_is_help=True, help="Markdown -> AST -> renderable element tree")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    ):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="render")(render_cmd)
app.command(name="ast")(ast_cmd)
