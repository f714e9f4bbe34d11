#!/usr/bin/env python3
"""Run the mesh dashboard, headless or in a live matplotlib window."""

import argparse
import logging
from typing import Any, Generator, List

import matplotlib.pyplot as plt
import simpy
import simpy.rt

from echo_mesh.config import DashboardConfig, load_config
from echo_mesh.core.messages import Message
from echo_mesh.core.simulator import MeshDashboard
from echo_mesh.utils.metrics import format_bytes, save_stats_to_json
from echo_mesh.utils.visualization import save_frame


def scripted_messages(
    dashboard: MeshDashboard, messages: List[str], interval: float
) -> Generator[simpy.events.Event, Any, None]:
    """Type and send each message through the terminal, one per interval."""
    for text in messages:
        yield dashboard.env.timeout(interval)
        dashboard.terminal.type(text)
        dashboard.terminal.send()


def print_message(message: Message) -> None:
    lock = "ENC" if message.encrypted else "PLN"
    print(f"  {message.direction} {lock} #{message.hash}  {message.content}")


def build_config(args: argparse.Namespace) -> DashboardConfig:
    config = load_config(args.config) if args.config else DashboardConfig()
    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.no_loopback:
        overrides["allow_loopback"] = False
    return config.with_overrides(**overrides) if overrides else config.validate()


def run_live(config: DashboardConfig) -> MeshDashboard:
    """Run in real time, one simulated millisecond per wall-clock millisecond."""
    env = simpy.rt.RealtimeEnvironment(factor=0.001, strict=False)
    plt.ion()
    fig, ax = plt.subplots(figsize=(6, 6))
    fig.canvas.manager.set_window_title("NETWORK TOPOLOGY")

    dashboard = MeshDashboard(config, env=env, surface=ax)

    def refresh(commands, now):
        fig.canvas.draw_idle()
        plt.pause(0.001)

    dashboard.register_hook("frame_rendered", refresh)
    dashboard.register_hook(
        "stats_updated", lambda stats: print(dashboard.status_line(), end="\r")
    )
    return dashboard


def main():
    """Main function to run the dashboard"""
    parser = argparse.ArgumentParser(description="P2P mesh dashboard simulation")
    parser.add_argument(
        "--duration", type=float, default=10000, help="Run time in milliseconds"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", help="JSON file of config overrides")
    parser.add_argument(
        "--live", action="store_true", help="Show the topology in a live window"
    )
    parser.add_argument("--frame", help="Save the last frame to this PNG file")
    parser.add_argument("--stats", help="Save the final stats to this JSON file")
    parser.add_argument(
        "--message",
        action="append",
        default=[],
        help="Message to send (repeatable, one every 1.5 s)",
    )
    parser.add_argument(
        "--plaintext", action="store_true", help="Send messages unencrypted"
    )
    parser.add_argument(
        "--no-loopback",
        action="store_true",
        help="Never address a packet to its own sender",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    config = build_config(args)
    if args.live:
        dashboard = run_live(config)
    else:
        dashboard = MeshDashboard(config)

    if args.plaintext:
        dashboard.terminal.toggle_encryption()
    dashboard.register_hook("message_added", print_message)
    if args.message:
        print(dashboard.terminal.mode_banner())
        dashboard.env.process(scripted_messages(dashboard, args.message, 1500))

    print("\n=== Message Log ===")
    try:
        stats = dashboard.run(args.duration)
    finally:
        dashboard.teardown()

    print("\n=== Packet Log ===")
    for line in dashboard.packet_log():
        print(f"  {line}")

    print("\n=== Status ===")
    print(f"  {dashboard.status_line()}")
    print(f"  Packets created: {dashboard.packets.created}")
    print(f"  Transfer:        {format_bytes(stats.bytes_transferred)}")

    if args.frame:
        save_frame(dashboard.last_frame or dashboard.render(), args.frame)
    if args.stats:
        save_stats_to_json(
            stats,
            dashboard.packets.packets,
            args.stats,
            messages=len(dashboard.exchange),
            duration_ms=args.duration,
        )

    if args.live:
        plt.ioff()
        plt.show()


if __name__ == "__main__":
    main()
