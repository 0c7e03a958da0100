"""
Local maintenance commands for the movie explorer store.

Usage:
    movie-explorer trending
    movie-explorer favorites user_123
    movie-explorer reviews 550
    movie-explorer compact-favorites user_123
    movie-explorer reset --yes
    movie-explorer --backend redis trending
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from movie_explorer.settings import AppSettings, get_settings
from movie_explorer.storage.backend import build_backend
from movie_explorer.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for warning in settings.optional_config_warnings():
        logger.warning(warning)


def _run(ctx: click.Context, operation: Callable[[DocumentStore], Awaitable[T]]) -> T:
    settings: AppSettings = ctx.obj["settings"]

    async def _scenario() -> T:
        backend = build_backend(settings)
        try:
            return await operation(DocumentStore(backend, settings=settings))
        finally:
            await backend.aclose()

    return asyncio.run(_scenario())


@click.group()
@click.option(
    "--backend",
    "backend_name",
    type=click.Choice(["memory", "redis"]),
    default=None,
    help="Override STORAGE_BACKEND for this invocation.",
)
@click.pass_context
def main(ctx: click.Context, backend_name: str | None) -> None:
    """Inspect and maintain the locally stored collections."""

    settings = get_settings()
    if backend_name is not None:
        settings = settings.model_copy(update={"storage_backend": backend_name})
    configure_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.pass_context
def trending(ctx: click.Context) -> None:
    """Show the most searched movies."""

    entries = _run(ctx, lambda store: store.get_trending_movies())
    if not entries:
        click.echo("No searches recorded yet")
        return
    for rank, entry in enumerate(entries, start=1):
        click.echo(f"{rank}. {entry.title} (movie {entry.movie_id}) - {entry.count} searches")


@main.command()
@click.argument("user_id")
@click.pass_context
def favorites(ctx: click.Context, user_id: str) -> None:
    """List USER_ID's favorites, newest first."""

    entries = _run(ctx, lambda store: store.get_favorites(user_id))
    if not entries:
        click.echo(f"No favorites for {user_id}")
        return
    for entry in entries:
        click.echo(f"{entry.created_at.isoformat()}  {entry.movie_id}  {entry.title}")


@main.command()
@click.argument("movie_id")
@click.pass_context
def reviews(ctx: click.Context, movie_id: str) -> None:
    """List reviews left on MOVIE_ID, newest first."""

    entries = _run(ctx, lambda store: store.get_reviews(movie_id))
    if not entries:
        click.echo(f"No reviews for movie {movie_id}")
        return
    for entry in entries:
        click.echo(f"[{entry.rating}/5] {entry.user_name}: {entry.text}")


@main.command("compact-favorites")
@click.argument("user_id")
@click.pass_context
def compact_favorites(ctx: click.Context, user_id: str) -> None:
    """Remove duplicated movies from USER_ID's favorites."""

    kept = _run(ctx, lambda store: store.compact_favorites(user_id))
    click.echo(f"{len(kept)} favorite(s) kept for {user_id}")


@main.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Wipe users, session, favorites, reviews, and searches."""

    if not yes:
        click.confirm("This deletes all locally stored data. Continue?", abort=True)
    _run(ctx, lambda store: store.clear_all_data())
    click.echo("All local data cleared.")


if __name__ == "__main__":
    main()
