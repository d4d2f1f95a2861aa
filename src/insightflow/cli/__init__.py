"""Command line entry points for insightflow."""

from typer import Typer

from .recommend import recommend_app


cli = Typer(help="insightflow command line tools")
cli.add_typer(recommend_app, name="recommend")

__all__ = ["cli", "recommend_app"]
