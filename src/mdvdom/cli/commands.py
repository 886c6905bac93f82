"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from mdvdom.config import Settings, load_config
from mdvdom.core.errors import ParseError
from mdvdom.core.export import write_output
from mdvdom.core.parse import discover_files, parse_file
from mdvdom.core.render import render_file


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def render_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to render")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Output format: json or html")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    position: Annotated[Optional[bool], typer.Option("--position/--no-position", help="Keep source positions")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--lenient", help="Fail on unresolved references")] = None,
    ):
    """Render markdown files to element trees (JSON) or HTML."""
    settings = _settings(overrides={
        "output_dir": out, "output_format": fmt, "parser_config": parser,
        "position": position, "strict_references": strict,
    })
    files = discover_files(Path(path))
    if not files:
        typer.echo(f"No .md/.mdx files found at {path}.")
        raise typer.Exit(1)

    output_dir = Path(settings.output_dir)
    for p in files:
        result = render_file(p, settings=settings)
        if not result.ok:
            _fail(f"Failed to render {p}", result.error)
        out_path = write_output(result.element, output_dir, p.stem, settings.output_format)
        typer.echo(f"  {p} -> {out_path}")
    typer.echo(f"Rendered {len(files)} document(s) to {output_dir}/")


def ast_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to parse")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    position: Annotated[Optional[bool], typer.Option("--position/--no-position", help="Keep source positions")] = None,
    ):
    """Print the parsed AST of a markdown file as JSON."""
    settings = _settings(overrides={"parser_config": parser, "position": position})
    try:
        root = parse_file(Path(path), position=settings.position, parser_config=settings.parser_config)
    except (ParseError, OSError) as e:
        _fail(f"Failed to parse {path}", e)
    typer.echo(root.model_dump_json(indent=2, exclude_none=True))
