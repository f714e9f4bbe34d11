"""Visualization utilities for the mesh dashboard.

This module turns the packet window and topology into a list of draw commands
(``render_frame``) and paints such a list onto a matplotlib Axes
(``draw_frame``). Rendering is split so the frame content can be checked
without a display.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.patches import Circle, Rectangle

from echo_mesh.core.enums import PacketStatus
from echo_mesh.core.packet import Packet
from echo_mesh.core.topology import Point, Topology

logger = logging.getLogger(__name__)

BACKGROUND = "#0a0a0a"
MESH_BLUE = "#2563eb"
ENCRYPTED_COLOR = "#8b5cf6"
PLAINTEXT_COLOR = "#06b6d4"
LABEL_COLOR = "#ffffff"

GLOW_RADIUS = 20
NODE_RADIUS = 6
MARKER_RADIUS = 4
LABEL_OFFSET = 20


@dataclass(frozen=True)
class Clear:
    width: float
    height: float
    color: str = BACKGROUND


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    color: str
    width: float = 1.0
    alpha: float = 1.0


@dataclass(frozen=True)
class Disc:
    center: Point
    radius: float
    color: str
    alpha: float = 1.0


@dataclass(frozen=True)
class Glow:
    """Radial fade from ``alpha`` at the center to 0 at ``radius``."""

    center: Point
    radius: float
    color: str
    alpha: float = 0.3


@dataclass(frozen=True)
class Label:
    position: Point
    text: str
    color: str = LABEL_COLOR
    alpha: float = 0.5
    size: float = 10


DrawCommand = Union[Clear, Line, Disc, Glow, Label]


def packet_color(packet: Packet) -> str:
    return ENCRYPTED_COLOR if packet.encrypted else PLAINTEXT_COLOR


def transit_progress(
    packet: Packet, now: float, transit_after: float = 1000, transit_time: float = 2000
) -> float:
    """Fraction of the edge an in-transit packet has covered, clamped to [0, 1]."""
    progress = (now - packet.created_at - transit_after) / transit_time
    return min(1.0, max(0.0, progress))


def interpolate(start: Point, end: Point, progress: float) -> Point:
    return (
        start[0] + (end[0] - start[0]) * progress,
        start[1] + (end[1] - start[1]) * progress,
    )


def render_frame(
    packets: Iterable[Packet],
    topology: Topology,
    now: float,
    transit_after: float = 1000,
    terminal_after: float = 3000,
) -> List[DrawCommand]:
    """Build the draw commands for one frame.

    Args:
        packets: Current packet window.
        topology: Node layout.
        now: Current time in milliseconds, used to place transit markers.
        transit_after: Packet age at which transit starts.
        terminal_after: Packet age at which the packet resolves; the marker
            reaches the receiver at this age.

    Returns:
        Draw commands in painting order.
    """
    commands: List[DrawCommand] = [Clear(topology.width, topology.height)]

    for u, v in topology.all_edges():
        commands.append(
            Line(topology.position(u), topology.position(v), MESH_BLUE, alpha=0.1)
        )

    for node in range(topology.node_count):
        x, y = topology.position(node)
        commands.append(Glow((x, y), GLOW_RADIUS, MESH_BLUE))
        commands.append(Disc((x, y), NODE_RADIUS, MESH_BLUE))
        commands.append(Label((x, y + LABEL_OFFSET), f"{node:X}"))

    for packet in packets:
        if packet.status is not PacketStatus.TRANSIT:
            continue
        start = topology.position(packet.sender)
        end = topology.position(packet.receiver)
        color = packet_color(packet)
        commands.append(Line(start, end, color, width=2))
        progress = transit_progress(
            packet, now, transit_after, terminal_after - transit_after
        )
        marker = interpolate(start, end, progress)
        commands.append(Disc(marker, MARKER_RADIUS, color))

    return commands


def draw_frame(
    surface: Optional[Axes], commands: Sequence[DrawCommand], glow_steps: int = 6
) -> bool:
    """Paint draw commands onto a matplotlib Axes.

    The Axes is cleared first, so nothing from a previous frame survives.

    Args:
        surface: Target Axes, or None when no surface is ready.
        commands: Output of ``render_frame``.
        glow_steps: Number of rings used to approximate a radial glow.

    Returns:
        True if the frame was painted, False if it was skipped.
    """
    if surface is None:
        logger.debug("No drawing surface, skipping frame")
        return False

    surface.clear()
    for command in commands:
        if isinstance(command, Clear):
            surface.set_xlim(0, command.width)
            surface.set_ylim(command.height, 0)
            surface.set_aspect("equal")
            surface.set_axis_off()
            surface.add_patch(
                Rectangle((0, 0), command.width, command.height, color=command.color)
            )
        elif isinstance(command, Line):
            surface.plot(
                [command.start[0], command.end[0]],
                [command.start[1], command.end[1]],
                color=command.color,
                linewidth=command.width,
                alpha=command.alpha,
            )
        elif isinstance(command, Glow):
            for step in range(glow_steps):
                fraction = 1 - step / glow_steps
                surface.add_patch(
                    Circle(
                        command.center,
                        command.radius * fraction,
                        color=command.color,
                        alpha=command.alpha / glow_steps,
                        linewidth=0,
                    )
                )
        elif isinstance(command, Disc):
            surface.add_patch(
                Circle(command.center, command.radius, color=command.color,
                       alpha=command.alpha)
            )
        elif isinstance(command, Label):
            surface.text(
                command.position[0],
                command.position[1],
                command.text,
                color=command.color,
                alpha=command.alpha,
                fontsize=command.size,
                family="monospace",
                ha="center",
                va="center",
            )
        else:
            raise TypeError(f"Unknown draw command: {command!r}")
    return True


def save_frame(
    commands: Sequence[DrawCommand],
    filename: Optional[str] = None,
    figsize: Tuple[int, int] = (6, 6),
    block: bool = True,
) -> None:
    """Save a rendered frame to a file.

    Args:
        commands: Output of ``render_frame``.
        filename: Output filename, or None to show it immediately.
        figsize: Figure size as (width, height) in inches.
        block: Whether showing the figure blocks until it is closed.
    """
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(BACKGROUND)
    draw_frame(ax, commands)
    plt.tight_layout()

    if filename:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filename, facecolor=fig.get_facecolor())
        plt.close(fig)
        logger.info("Saved frame to %s", filename)
    else:
        plt.show(block=block)
        if not block:
            plt.pause(0.001)
