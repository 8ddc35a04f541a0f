import logging
from functools import partial

import click
import sentry_sdk

from contribgraph.clients.git_client import read_commit_dates
from contribgraph.core.observability import configure_logging
from contribgraph.core.observability import init_sentry
from contribgraph.render.raster import CairoPngEncoder
from contribgraph.render.raster import write_png
from contribgraph.render.scene import CALENDAR_BACKGROUND
from contribgraph.render.scene import build_calendar_svg
from contribgraph.render.scene import build_graph_svg
from contribgraph.services.graph_service import GRAPH_HEIGHT
from contribgraph.services.graph_service import GRAPH_WIDTH
from contribgraph.services.graph_service import layout_graph
from contribgraph.services.heatmap_service import build_calendar_grid
from contribgraph.services.heatmap_service import fetch_year_histogram
from contribgraph.settings import Settings


logger = logging.getLogger(__name__)

MIN_YEAR = 1970
MAX_YEAR = 2100

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("output_path", required=False)
@click.pass_obj
def graph_command(app_settings: Settings, output_path: str | None) -> None:
    """Render the fixed force-directed diagram to OUTPUT_PATH."""

    output_path = output_path or app_settings.default_output_path
    nodes, links = layout_graph(width=GRAPH_WIDTH, height=GRAPH_HEIGHT)
    markup = build_graph_svg(nodes, links, GRAPH_WIDTH, GRAPH_HEIGHT)
    path = write_png(markup, output_path, CairoPngEncoder())
    click.echo(f"Wrote {path}")


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("repo_path")
@click.argument("year", type=click.IntRange(MIN_YEAR, MAX_YEAR))
@click.argument("output_path", required=False)
@click.pass_obj
def calendar_command(
    app_settings: Settings, repo_path: str, year: int, output_path: str | None
) -> None:
    """Render a contribution calendar of REPO_PATH's commits in YEAR."""

    output_path = output_path or app_settings.default_output_path
    reader = partial(read_commit_dates, git_binary=app_settings.git_binary)
    histogram = fetch_year_histogram(repo_path, year, reader=reader)
    grid = build_calendar_grid(year, histogram)
    markup = build_calendar_svg(grid)
    encoder = CairoPngEncoder(background=CALENDAR_BACKGROUND)
    path = write_png(markup, output_path, encoder)
    click.echo(f"Wrote {path}")


def run(
    command: click.Command,
    args: list[str] | None = None,
    prog_name: str | None = None,
    app_settings: Settings | None = None,
) -> int:
    """Invoke a command and translate every failure into exit status 1."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    try:
        result = command.main(
            args=args,
            prog_name=prog_name,
            standalone_mode=False,
            obj=app_settings,
        )
    except click.UsageError as exc:
        exc.show()
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except Exception as exc:
        logger.exception("Render failed")
        sentry_sdk.capture_exception(exc)
        click.echo(f"Error: {exc}", err=True)
        return 1

    return result if isinstance(result, int) else 0


def graph_main(args: list[str] | None = None) -> int:
    return run(graph_command, args, prog_name="contribgraph-graph")


def calendar_main(args: list[str] | None = None) -> int:
    return run(calendar_command, args, prog_name="contribgraph-calendar")
