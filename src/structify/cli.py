"""
structify command line interface.

Commands:
- generate: Transform every declaration in a file into a Python module
- check: Report drift between declarations and previously generated code
- show: Display how each declaration resolves (backing type, capabilities, values)
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from structify import __version__
from structify.core.config import TransformConfig, find_config, load_config
from structify.core.consistency import check_consistency
from structify.core.errors import StructifyError
from structify.core.parser import load_declarations
from structify.core.pipeline import analyze, render_module, structify_all

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Turn closed enumeration declarations into open integer wrapper classes.",
    no_args_is_help=True,
)
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"structify {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """structify - open enumerations for Python."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(input_path: Path, config_path: Path | None) -> TransformConfig:
    if config_path is not None:
        return load_config(config_path)
    found = find_config(input_path.resolve())
    if found is None:
        return TransformConfig()
    logger.info(f"Using configuration from {found}")
    return load_config(found)


def _fail(error: StructifyError) -> typer.Exit:
    err_console.print(f"[bold red]error:[/bold red] {escape(str(error))}", highlight=False)
    return typer.Exit(code=1)


@app.command("generate")
def generate_command(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Declaration file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the module here instead of stdout"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file"
    ),
) -> None:
    """
    Generate a Python module from enumeration declarations.
    """
    try:
        config = _resolve_config(input_path, config_path)
        declarations = load_declarations(input_path)
        fragments = structify_all(declarations, config)
    except StructifyError as e:
        raise _fail(e) from e

    module = render_module(fragments, source=input_path.name)

    if output is None:
        typer.echo(module, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(module, encoding="utf-8")
    logger.info(f"Wrote {len(fragments)} wrapper(s) to {output}")
    err_console.print(f"Generated {output} ({len(fragments)} wrapper(s))", highlight=False)


@app.command("check")
def check_command(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Declaration file"),
    generated: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated module"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file"
    ),
) -> None:
    """
    Check that a generated module still matches its declarations.
    """
    try:
        config = _resolve_config(input_path, config_path)
        declarations = load_declarations(input_path)
        analyses = [analyze(declaration, config) for declaration in declarations]
    except StructifyError as e:
        raise _fail(e) from e

    source = generated.read_text(encoding="utf-8")
    problems: list[str] = []
    for declaration, analysis in zip(declarations, analyses, strict=True):
        problems.extend(check_consistency(declaration, analysis, source))

    if problems:
        for problem in problems:
            err_console.print(f"[yellow]drift:[/yellow] {escape(problem)}", highlight=False)
        err_console.print(
            f"{generated} is out of sync with {input_path}; run `structify generate` again.",
            highlight=False,
        )
        raise typer.Exit(code=1)

    console.print(f"{generated} is in sync with {input_path}", highlight=False)


@app.command("show")
def show_command(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Declaration file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file"
    ),
) -> None:
    """
    Show how each declaration resolves without generating code.
    """
    try:
        config = _resolve_config(input_path, config_path)
        declarations = load_declarations(input_path)
        resolved = [(declaration, analyze(declaration, config)) for declaration in declarations]
    except StructifyError as e:
        raise _fail(e) from e

    for declaration, analysis in resolved:
        table, representation = analysis.table, analysis.representation
        table_view = Table(title=f"{declaration.visibility} enum {declaration.name}".strip())
        table_view.add_column("Variant", style="cyan")
        table_view.add_column("Expression")
        table_view.add_column("Value", justify="right")
        for name, discriminant in table.entries.items():
            value = "?" if discriminant.value is None else str(discriminant.value)
            marker = " (default)" if name == table.default_variant else ""
            table_view.add_row(f"{name}{marker}", escape(discriminant.expr), value)

        console.print(table_view)
        console.print(f"  backing: {representation.backing.value}", highlight=False)
        console.print(f"  transparent: {representation.transparent}", highlight=False)
        if representation.residual_hints:
            console.print(
                f"  repr hints: {', '.join(representation.residual_hints)}", highlight=False
            )
        capabilities = ", ".join(analysis.classified.capabilities.names())
        console.print(f"  capabilities: {capabilities}", highlight=False)
        console.print()


def main() -> None:
    """Entry point for the structify console script."""
    app()


if __name__ == "__main__":
    main()
