# File: sitewalker/progress.py
"""sitewalker.progress: Console spinner shown while a crawl is running."""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

import click

__all__ = ["FRAMES", "animate", "success"]

FRAMES: Sequence[str] = (".  ", ".. ", "...", " ..", "  .", "   ")


async def animate(
    label: str,
    done: asyncio.Event,
    *,
    interval: float = 0.25,
    echo: Callable[..., None] = click.echo,
) -> int:
    """
    Redraw ``[PENDING] <label>...`` in place until ``done`` is set.

    Returns the number of frames drawn.
    """
    pending = click.style("[PENDING]", fg=(255, 175, 95))
    frames = 0
    while not done.is_set():
        dots = click.style(FRAMES[frames % len(FRAMES)], fg=(255, 175, 95))
        echo(f"\r{pending} {label}{dots}", nl=False)
        frames += 1
        try:
            await asyncio.wait_for(done.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue
    if frames:
        echo("")
    return frames


def success(message: str, *, echo: Callable[..., None] = click.echo) -> None:
    """``[SUCCESS] <message>`` in green."""
    echo(f"{click.style('[SUCCESS]', fg='green')} {message}")
