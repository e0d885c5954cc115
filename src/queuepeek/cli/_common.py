"""Shared plumbing for CLI commands."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from queuepeek.cli._console import console, error_panel, nl
from queuepeek.domain import EntityRef
from queuepeek.service import MessageService, default_source_factory

T = TypeVar("T")


def resolve_entity(entity: str, subscription: str | None) -> EntityRef:
    try:
        return EntityRef.parse(entity, subscription)
    except ValueError as e:
        error_panel(str(e), title="Invalid entity")
        raise typer.Exit(1)


def build_service(redis_url: str | None) -> MessageService:
    """Create the service used by CLI commands."""
    return MessageService(default_source_factory(redis_url))


def run_command(coro: Coroutine[Any, Any, T], *, verbose: bool = False) -> T | None:
    """
    Run a command coroutine.

    Cancellation and Ctrl+C end the command quietly and return None; any
    other failure is shown in an error panel.
    """
    try:
        return asyncio.run(coro)
    except (KeyboardInterrupt, asyncio.CancelledError):
        nl()
        return None
    except Exception as e:
        error_panel(str(e) or type(e).__name__)
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
