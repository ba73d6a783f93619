"""
apidecl CLI.

Commands:
- check: validate declaration files without compiling them
- compile: compile the project's declaration directory into a fact cache
- resolve: show the request a declaration resolves to (dry run)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from apidecl._version import get_version
from apidecl.core.cache import CompiledFactCache
from apidecl.core.compiler import validate_source
from apidecl.core.errors import ApiDeclError, ExtractionError
from apidecl.core.manifest import find_manifest
from apidecl.runtime.evaluator import resolve_request
from apidecl.runtime.loader import compile_directory

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Validate, compile, and resolve API declarations",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"apidecl version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output to stderr"
    ),
) -> None:
    """apidecl CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(name="check")
def check(
    files: list[Path] = typer.Argument(  # noqa: B008
        ..., exists=True, dir_okay=False, help="Declaration source files"
    ),
) -> None:
    """
    Validate declarations in source files.

    Every declaration is checked and reported; nothing is cached.

    Examples:
        apidecl check data/api/users.ts
        apidecl check data/api/*.ts
    """
    table = Table(title="Declarations")
    table.add_column("File")
    table.add_column("Declaration")
    table.add_column("Fields")
    table.add_column("Status")

    total = 0
    failed = 0
    for path in files:
        try:
            results = validate_source(path.read_text(encoding="utf-8"))
        except ExtractionError as e:
            err_console.print(f"[red]{path}: {escape(str(e))}[/red]")
            failed += 1
            continue

        for result in results:
            total += 1
            if result.error:
                failed += 1
                status = f"[red]{escape(result.error)}[/red]"
            else:
                status = "[green]ok[/green]"
            table.add_row(str(path), result.declaration, ", ".join(result.req_data_keys), status)

    if total:
        console.print(table)
    console.print(f"{total} declarations checked, {failed} failed")
    if failed:
        raise typer.Exit(code=1)


@app.command(name="compile")
def compile_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Cache file (default: api.cache_file from apidecl.toml)",
    ),
) -> None:
    """
    Compile the project's declaration directory into a fact cache.

    Examples:
        apidecl compile
        apidecl compile -p my-app -o facts.json
    """
    try:
        manifest = find_manifest(project_dir)
        cache = compile_directory(manifest.api_dir, manifest.api.suffixes)
    except ApiDeclError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    target = output or manifest.cache_path
    try:
        cache.save(target)
    except OSError as e:
        err_console.print(f"[red]Cannot write fact cache to {escape(str(target))}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Compiled {len(cache)} declarations[/green]")
    typer.echo(f"Fact cache written to {target}")


@app.command(name="resolve")
def resolve_command(
    declaration: str = typer.Argument(..., help="Declaration text"),
    data: str = typer.Option("{}", "--data", "-d", help="Payload as a JSON object"),
    cache_file: Path | None = typer.Option(
        None,
        "--cache",
        "-c",
        help="Fact cache (default: api.cache_file from apidecl.toml)",
    ),
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
) -> None:
    """
    Show the request a compiled declaration resolves to, without sending it.

    Examples:
        apidecl resolve "(Rest/get /users/:id selfMappings)" -d '{"id": 1}'
    """
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Invalid --data JSON: {e}[/red]")
        raise typer.Exit(code=1)
    if not isinstance(payload, dict):
        err_console.print("[red]--data must be a JSON object[/red]")
        raise typer.Exit(code=1)

    try:
        path = cache_file or find_manifest(project_dir).cache_path
        request = resolve_request(CompiledFactCache.load(path), declaration, payload)
    except ApiDeclError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    typer.echo(request.model_dump_json(indent=2, exclude_none=True))


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
