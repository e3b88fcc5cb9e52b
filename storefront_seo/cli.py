"""Typer CLI application for Storefront SEO.

Provides commands to import catalog content, run the SEO audit, inspect
meta tag coverage and keyword usage, and generate sitemap.xml and robots.txt.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()
app = typer.Typer(
    name="seo",
    help="Storefront SEO -- audit products and pages for SEO completeness.",
    add_completion=False,
    no_args_is_help=True,
)

_CONFIG_HELP = "Path to settings.yaml."


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_app(config: str):
    """Lazy-import, initialise and return the application."""
    from storefront_seo.app import StorefrontSEO
    instance = StorefrontSEO(config_path=config)
    instance.initialize()
    return instance


def _truncate(text: str, limit: int = 40) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


# ------------------------------------------------------------------
# setup
# ------------------------------------------------------------------
@app.command()
def setup(
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Create data directories and database tables."""
    _setup_logging(verbose)
    console.print(Panel("[bold cyan]Storefront SEO Setup[/bold cyan]"))

    console.print("\n[bold]Step 1: Configuration[/bold]")
    if Path(config).exists():
        console.print("[green]✔[/green] " + config + " found.")
    else:
        console.print("[yellow]⚠[/yellow] " + config + " not found. Using defaults.")

    console.print("\n[bold]Step 2: Environment Variables[/bold]")
    if Path(".env").exists():
        console.print("[green]✔[/green] .env file found.")
    else:
        console.print("[yellow]⚠[/yellow] .env file not found. Copy .env.example to .env to customise.")

    console.print("\n[bold]Step 3: Database Initialization[/bold]")
    try:
        _get_app(config)
        console.print("[green]✔[/green] Database tables created.")
    except Exception as exc:
        console.print("[red]✘[/red] Database error: " + str(exc))
        raise typer.Exit(code=1)

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Run [bold]seo load <file>[/bold] to import content, then [bold]seo audit[/bold].")


# ------------------------------------------------------------------
# load
# ------------------------------------------------------------------
@app.command()
def load(
    path: Path = typer.Argument(..., help="YAML or JSON content export."),
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Import products and pages (with SEO metadata) into the database."""
    _setup_logging(verbose)
    from storefront_seo.utils.content_loader import ContentLoadError, load_content_file

    _get_app(config)
    try:
        counts = load_content_file(path)
    except ContentLoadError as exc:
        console.print("[red]✘[/red] " + str(exc))
        raise typer.Exit(code=1)
    console.print(
        "[green]✔[/green] Imported " + str(counts["products"]) + " products and "
        + str(counts["pages"]) + " pages."
    )


# ------------------------------------------------------------------
# audit
# ------------------------------------------------------------------
@app.command()
def audit(
    filter_name: str = typer.Option("all", "--filter", "-f", help="all, critical, warning or good."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON results to this file."),
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Audit every published product and page, worst scores first."""
    _setup_logging(verbose)
    from storefront_seo.modules.seo_audit import FILTERS, filter_results, score_label, summarize

    if filter_name not in FILTERS:
        console.print("[red]Invalid filter " + repr(filter_name) + ". Use one of: " + ", ".join(FILTERS) + "[/red]")
        raise typer.Exit(code=1)

    instance = _get_app(config)
    assembler = instance.get_assembler()
    results = assembler.build_report()
    shown = filter_results(results, filter_name)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps([r.to_dict() for r in shown], indent=2), encoding="utf-8")

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in shown], indent=2))
        return

    counts = summarize(results)
    console.print(Panel("[bold cyan]SEO Audit[/bold cyan]"))
    console.print(
        "Total: " + str(counts["total"])
        + "  Critical: " + str(counts["critical"])
        + "  Warnings: " + str(counts["warning"])
        + "  Good: " + str(counts["good"])
    )

    if not shown:
        console.print("[yellow]No results found for this filter.[/yellow]")
        return

    table = Table(title="Audit Results (" + filter_name + ")", show_header=True, header_style="bold magenta")
    table.add_column("Score", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Title", max_width=40)
    table.add_column("Issues", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Edit")
    for result in shown:
        style = _score_style(result.score)
        table.add_row(
            "[" + style + "]" + str(result.score) + "% " + score_label(result.score) + "[/" + style + "]",
            result.kind.value,
            _truncate(result.title or "(untitled)"),
            str(len(result.issues)),
            str(len(result.warnings)),
            assembler.edit_path(result),
        )
    console.print(table)

    if verbose:
        for result in shown:
            console.print("\n[bold]" + (result.title or "(untitled)") + "[/bold] /" + result.slug)
            for issue in result.issues:
                console.print("  [red]✘ " + issue + "[/red]")
            for warning in result.warnings:
                console.print("  [yellow]⚠ " + warning + "[/yellow]")
            for success in result.successes:
                console.print("  [green]✔ " + success + "[/green]")

    if output:
        console.print("Results saved to: [bold]" + output + "[/bold]")


# ------------------------------------------------------------------
# overview
# ------------------------------------------------------------------
@app.command()
def overview(
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show meta tag coverage and focus keyword usage."""
    _setup_logging(verbose)
    stats = _get_app(config).get_overview()

    table = Table(title="SEO Overview", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan", min_width=25)
    table.add_column("Value", justify="right")
    table.add_row("Total pages", str(stats["total_pages"]))
    table.add_row("Products", str(stats["products"]))
    table.add_row("Pages", str(stats["pages"]))
    table.add_row("With meta title", str(stats["with_seo"]))
    table.add_row("Missing meta title", str(stats["missing_meta_title"]))
    table.add_row("Missing meta description", str(stats["missing_meta_description"]))
    table.add_row("Completion rate", str(stats["completion_rate"]) + "%")
    table.add_row("Average audit score", str(stats["avg_seo_score"]))
    console.print(table)

    keywords = stats["keywords"]
    if not keywords:
        console.print("[yellow]No focus keywords set yet.[/yellow]")
        return
    kw_table = Table(title="Focus Keyword Usage", show_header=True, header_style="bold magenta")
    kw_table.add_column("Keyword", style="cyan")
    kw_table.add_column("Count", justify="right")
    for keyword, count in keywords:
        kw_table.add_row(keyword, str(count))
    console.print(kw_table)


# ------------------------------------------------------------------
# meta-tags
# ------------------------------------------------------------------
@app.command("meta-tags")
def meta_tags(
    filter_name: str = typer.Option("all", "--filter", "-f", help="all, complete or missing."),
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """List meta titles and descriptions with their lengths."""
    _setup_logging(verbose)
    from storefront_seo.modules.seo_audit.overview import META_FILTERS, list_meta_tags

    if filter_name not in META_FILTERS:
        console.print("[red]Invalid filter " + repr(filter_name) + ". Use one of: " + ", ".join(META_FILTERS) + "[/red]")
        raise typer.Exit(code=1)

    items = _get_app(config).get_repository().list_published_auditable_items()
    rows = list_meta_tags(items, filter_name)

    table = Table(title="Meta Tags (" + filter_name + ")", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", max_width=30)
    table.add_column("Type")
    table.add_column("Meta title", max_width=30)
    table.add_column("Len", justify="right")
    table.add_column("Meta description", max_width=40)
    table.add_column("Len", justify="right")
    for row in rows:
        table.add_row(
            _truncate(row["title"], 30),
            row["type"],
            _truncate(row["meta_title"], 30) or "[red]missing[/red]",
            row["meta_title_length"],
            _truncate(row["meta_description"]) or "[red]missing[/red]",
            row["meta_description_length"],
        )
    console.print(table)
    console.print(str(len(rows)) + " items.")


# ------------------------------------------------------------------
# sitemap
# ------------------------------------------------------------------
@app.command()
def sitemap(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write sitemap.xml to this file."),
    as_xml: bool = typer.Option(False, "--xml", help="Print the sitemap XML instead of the summary."),
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Generate the XML sitemap from published products and pages."""
    _setup_logging(verbose)
    from storefront_seo.modules.sitemap import render_sitemap_xml, sitemap_stats

    instance = _get_app(config)
    entries = instance.build_sitemap()
    xml = render_sitemap_xml(entries)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(xml, encoding="utf-8")

    if as_xml:
        typer.echo(xml)
        return

    stats = sitemap_stats(entries)
    table = Table(title="Sitemap Statistics", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan", min_width=20)
    table.add_column("Value", justify="right")
    table.add_row("Total URLs", str(stats["total_urls"]))
    table.add_row("Static routes", str(stats["static"]))
    table.add_row("Products", str(stats["products"]))
    table.add_row("Pages", str(stats["pages"]))
    console.print(table)
    console.print("Sitemap URL: [bold]" + instance.get_site_url() + "/sitemap.xml[/bold]")
    if output:
        console.print("Sitemap saved to: [bold]" + output + "[/bold]")


# ------------------------------------------------------------------
# robots
# ------------------------------------------------------------------
@app.command()
def robots(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write robots.txt to this file."),
    config: str = typer.Option("config/settings.yaml", "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Print robots.txt pointing crawlers at the sitemap."""
    _setup_logging(verbose)
    from storefront_seo.modules.sitemap import render_robots_txt

    text = render_robots_txt(_get_app(config).get_site_url())
    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    typer.echo(text, nl=False)


# ------------------------------------------------------------------
# dashboard
# ------------------------------------------------------------------
@app.command()
def dashboard(
    port: int = typer.Option(8501, "--port", "-p", help="Streamlit server port."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Launch the Streamlit SEO dashboard."""
    _setup_logging(verbose)
    console.print("[bold cyan]Launching dashboard on port " + str(port) + "...[/bold cyan]")
    import subprocess
    app_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "dashboard", "app.py")
    subprocess.run(
        ["streamlit", "run", app_path, "--server.port", str(port)],
        check=False,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
