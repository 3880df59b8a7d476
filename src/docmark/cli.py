"""Command-line interface for docmark."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from docmark import __version__
from docmark.config import get_settings
from docmark.core.transformer import ContentTransformer, TransformationError
from docmark.formatting.decoder import DocumentDecodeError, decode_document
from docmark.rules import SUPPORTED_SYNTAXES, FormattingRuleSet, get_rule_set

app = typer.Typer(
    name="docmark",
    help="Render stored rich-text documents into Markdown, HTML and other syntaxes.",
    add_completion=False,
)
console = Console()

INPUT_EXTENSION = ".json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"docmark v{__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Route docmark log records through rich."""
    settings = get_settings()
    logger = logging.getLogger("docmark")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_path=False)
    )
    logger.setLevel(logging.DEBUG if verbose else settings.log_level)
    logger.propagate = False


def generate_output_path(
    input_path: Path, extension: str, output_dir: Optional[Path] = None
) -> Path:
    """Generate output path by swapping in the rule set's extension."""
    output_name = f"{input_path.stem}{extension}"

    if output_dir:
        return output_dir / output_name
    return input_path.parent / output_name


def process_file(
    input_path: Path,
    output_path: Optional[Path],
    rule_set: FormattingRuleSet,
    max_depth: Optional[int],
    verbose: bool,
) -> bool:
    """Render a single document file. Returns True on success."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] File not found: {input_path}")
        return False

    if output_path is None:
        output_path = generate_output_path(input_path, rule_set.extension)

    if verbose:
        console.print(f"[blue]Processing:[/blue] {input_path}")
        console.print(f"[blue]Output:[/blue] {output_path}")
        console.print(f"[blue]Syntax:[/blue] {rule_set.name}")

    try:
        document = decode_document(input_path.read_bytes())
        transformer = ContentTransformer(rule_set, max_depth=max_depth)
        rendered = transformer.render(document)
        output_path.write_text(rendered, encoding="utf-8")
        console.print(f"[green]Success:[/green] {output_path}")
        return True
    except (DocumentDecodeError, TransformationError, OSError) as e:
        console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        if verbose:
            console.print_exception()
        return False


def process_folder(
    folder_path: Path,
    rule_set: FormattingRuleSet,
    max_depth: Optional[int],
    verbose: bool,
    recursive: bool = True,
) -> tuple[int, int]:
    """Render all document files in a folder. Returns (success_count, fail_count)."""
    if not folder_path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {folder_path}")
        return 0, 0

    pattern = f"*{INPUT_EXTENSION}"
    if recursive:
        files = sorted(folder_path.rglob(pattern))
    else:
        files = sorted(folder_path.glob(pattern))

    if not files:
        console.print(
            f"[yellow]No {INPUT_EXTENSION} documents found in {folder_path}[/yellow]"
        )
        return 0, 0

    console.print(f"[blue]Found {len(files)} document(s) to render[/blue]")

    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Rendering documents...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Rendering {file_path.name}...")
            if process_file(file_path, None, rule_set, max_depth, verbose):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="Document file or folder of .json documents to render",
        exists=True,
    ),
    syntax: Optional[str] = typer.Option(
        None,
        "--syntax",
        "-s",
        help=f"Target syntax ({', '.join(SUPPORTED_SYNTAXES)}; default: gfm)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (for single file only)",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        "-d",
        min=1,
        help="Deepest node nesting to accept (default: 200)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Render stored rich-text documents.

    Examples:

        docmark page.json  # Writes page.md

        docmark page.json --syntax html  # Writes page.html

        docmark /path/to/export --syntax gfm  # Renders every .json file
    """
    settings = get_settings()
    setup_logging(verbose)

    try:
        rule_set = get_rule_set(syntax or settings.default_syntax)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if path.is_file():
        success = process_file(path, output, rule_set, max_depth, verbose)
        raise typer.Exit(0 if success else 1)

    if output is not None:
        console.print(
            "[yellow]Warning:[/yellow] --output is ignored in folder mode. "
            "Files will be saved alongside the documents."
        )

    success, fail = process_folder(path, rule_set, max_depth, verbose)
    console.print(f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed")
    raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
