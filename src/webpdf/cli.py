"""
webpdf CLI - Convert a webpage into a paginated PDF.

Usage:
    webpdf convert https://example.com/article
    webpdf convert https://example.com/article --output article.pdf
    webpdf serve  # Start web API
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .errors import WebPDFError
from .extractor import ContentExtractor
from .fonts import FontProvider
from .logging_config import setup_logging
from .naming import FileNamer
from .renderer import PDFRenderer
from .styles import default_stylesheet, load_stylesheet

app = typer.Typer(
    name="webpdf",
    help="Convert a webpage into a clean, paginated PDF.",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"webpdf v{__version__}")
        raise typer.Exit()


def validate_url(url: str) -> str:
    """Validate and normalize URL."""
    url = url.strip()
    parsed = urlparse(url)
    if not parsed.scheme:
        url = f"https://{url}"
        parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise typer.BadParameter(f"Invalid URL scheme: {parsed.scheme}")

    if not parsed.netloc:
        raise typer.BadParameter("Invalid URL: missing domain")

    return url


def prompt_for_url() -> str:
    """Ask for a URL until a valid one is entered."""
    while True:
        url = typer.prompt("Enter the webpage URL to convert")
        try:
            return validate_url(url)
        except typer.BadParameter as e:
            console.print(f"[red]{e}[/red] Please enter a valid URL (including http:// or https://)")


def do_convert(
    url: str,
    output: Optional[Path],
    output_dir: Path,
    styles: Optional[Path],
    fonts_dir: Optional[Path],
    verbose: bool,
):
    """Core conversion logic."""
    try:
        url = validate_url(url)
    except typer.BadParameter as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold]webpdf[/bold] v{__version__}")
    console.print(f"Converting: [cyan]{url}[/cyan]\n")

    try:
        stylesheet = load_stylesheet(styles) if styles else default_stylesheet()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            # Step 1: Extract content
            task = progress.add_task("Fetching and extracting content...", total=None)
            with ContentExtractor() as extractor:
                page = extractor.extract(url)
            progress.update(task, completed=True)

            # Step 2: Pick the output path
            if output is None:
                output = FileNamer(output_dir).generate_path(page.title)
            else:
                output.parent.mkdir(parents=True, exist_ok=True)

            # Step 3: Generate PDF
            task = progress.add_task("Generating PDF...", total=None)
            renderer = PDFRenderer(stylesheet, font_provider=FontProvider(fonts_dir))
            renderer.render_page(page, output=output)
            progress.update(task, completed=True)

        result = renderer.last_result

        # Success output
        console.print()
        console.print(f"[green]Success![/green] PDF saved to: [bold]{output}[/bold]")
        console.print()
        console.print(f"  Title: {page.title}")
        if page.metadata.author:
            console.print(f"  Author: {page.metadata.author}")
        if page.metadata.site_name:
            console.print(f"  Site: {page.metadata.site_name}")
        console.print(f"  Blocks: {len(page.elements)}")
        console.print(f"  Words: {page.word_count:,}")
        console.print(f"  Pages: {result.page_count}")
        for warning in result.warnings:
            console.print(f"  [yellow]Warning:[/yellow] {warning}")
        console.print()

    except (WebPDFError, OSError) as e:
        logger.debug("Conversion failed", exc_info=True)
        console.print(f"\n[red]Error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: $WEBPDF_LOG_LEVEL or INFO)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write detailed logs to this file",
    ),
    version: bool = typer.Option(
        None,
        "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    Convert a webpage into a clean, paginated PDF.
    """
    try:
        setup_logging(log_level, log_file)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


@app.command()
def convert(
    url: Optional[str] = typer.Argument(
        None,
        help="URL of the webpage to convert (prompted for when omitted)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output PDF filename (default: generated from the page title)",
    ),
    output_dir: Path = typer.Option(
        Path("output"),
        "--output-dir", "-d",
        help="Directory for generated file names",
    ),
    styles: Optional[Path] = typer.Option(
        None,
        "--styles", "-s",
        exists=True,
        dir_okay=False,
        help="JSON file with style overrides",
    ),
    fonts_dir: Optional[Path] = typer.Option(
        None,
        "--fonts-dir",
        help="Directory with custom TrueType fonts (default: ./fonts)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-V",
        help="Show tracebacks on failure",
    ),
):
    """
    Convert a webpage URL to a paginated PDF.

    Example:
        webpdf convert https://example.com/blog/post
    """
    if url is None:
        url = prompt_for_url()

    do_convert(url, output, output_dir, styles, fonts_dir, verbose)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """
    Start the webpdf web API.
    """
    import uvicorn

    console.print("\n[bold]webpdf[/bold] Web API")
    console.print(f"Starting server at [cyan]http://{host}:{port}[/cyan]\n")

    uvicorn.run(
        "webpdf.web:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
