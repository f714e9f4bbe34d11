"""Dashboard session for the mesh simulation.

This module defines the MeshDashboard class, which owns the SimPy event loop,
one instance of every simulator, the three periodic timers and the render
pass.
"""

import logging
from typing import Any, Callable, Dict, Generator, List, Optional

import simpy
from matplotlib.axes import Axes

from echo_mesh.config import DashboardConfig
from echo_mesh.core.hooks import HookRegistry
from echo_mesh.core.lifecycle import PacketLifecycleSimulator
from echo_mesh.core.messages import Message, MessageExchange, TerminalInput
from echo_mesh.core.stats import Stats, StatsAccumulator
from echo_mesh.core.topology import Topology
from echo_mesh.utils.metrics import format_packet_log, format_status_line
from echo_mesh.utils.rng import SyntheticSource
from echo_mesh.utils.visualization import DrawCommand, draw_frame, render_frame

logger = logging.getLogger(__name__)


class MeshDashboard(HookRegistry):
    """One dashboard session.

    All state is mutated from SimPy process callbacks or from synchronous calls
    on this object, so everything runs on the thread driving ``env``.

    Attributes:
        config: Session configuration.
        env: SimPy environment. Time is measured in milliseconds.
        surface: Matplotlib Axes painted on every render, or None.
        topology: Current node layout.
        packets: Packet lifecycle simulator.
        exchange: Message exchange simulator.
        stats: Statistics accumulator.
        terminal: User input control bound to the exchange.
        connected: Cosmetic link state shown in the status bar.
        last_frame: Draw commands of the most recent render.
        timers: SimPy processes for the periodic ticks, keyed by name.
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        env: Optional[simpy.Environment] = None,
        surface: Optional[Axes] = None,
    ):
        """Initialize the session and start its timers.

        Args:
            config: Session configuration (defaults to ``DashboardConfig()``).
            env: SimPy environment to schedule on. A fresh one is created when
                omitted; pass a ``simpy.rt.RealtimeEnvironment`` to run live.
            surface: Optional Axes to paint frames onto.
        """
        self.config = (config or DashboardConfig()).validate()
        self.env = env if env is not None else simpy.Environment()
        self.surface = surface

        source = SyntheticSource(self.config.seed)
        self.packets = PacketLifecycleSimulator(self.config, source.spawn())
        self.exchange = MessageExchange(
            self.config, source.spawn(), clock=lambda: self.env.now
        )
        self.stats = StatsAccumulator(self.config, source.spawn())
        self.terminal = TerminalInput(self.exchange)
        self.topology = Topology(
            self.config.canvas_width,
            self.config.canvas_height,
            self.config.node_count,
        )
        self.connected = True
        self.closed = False
        self.last_frame: List[DrawCommand] = []

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "packets_updated": [],  # a packet was generated and statuses aged
            "frame_rendered": [],  # a new frame was built
            "message_added": [],  # the message log grew
            "message_sent": [],  # the user sent a message
            "stats_updated": [],  # the aggregate stats changed
        }

        self.exchange.register_hook("message_added", self._message_added)
        self.exchange.register_hook("message_sent", self._message_sent)

        self.timers: Dict[str, simpy.events.Process] = {
            "packets": self._start_timer(
                "packets", self.config.packet_period, self._packet_tick
            ),
            "stats": self._start_timer(
                "stats", self.config.stats_period, self._stats_tick
            ),
            "remote": self._start_timer(
                "remote", self.config.remote_period, self.exchange.on_remote_tick
            ),
        }
        logger.info(
            "Dashboard started with %d nodes (seed=%s)",
            self.config.node_count,
            self.config.seed,
        )

    def _start_timer(
        self, name: str, period: float, callback: Callable[[float], Any]
    ) -> simpy.events.Process:
        """Start a periodic process calling ``callback(now)`` every ``period``.

        Args:
            name: Timer name, for logging.
            period: Interval between ticks in milliseconds.
            callback: Function receiving the tick time.

        Returns:
            SimPy process for the timer.
        """

        def timer_process() -> Generator[simpy.events.Event, Any, None]:
            try:
                while not self.closed:
                    yield self.env.timeout(period)
                    callback(self.env.now)
            except simpy.Interrupt as interrupt:
                logger.debug("Timer %s stopped (%s)", name, interrupt.cause)

        return self.env.process(timer_process())

    def _packet_tick(self, now: float) -> None:
        self.packets.on_generation_tick(now)
        self.call_hooks("packets_updated", self.packets.packets, now)
        self.render()

    def _stats_tick(self, now: float) -> None:
        self.call_hooks("stats_updated", self.stats.on_ambient_tick(now))

    def _message_added(self, message: Message) -> None:
        self.call_hooks("message_added", message)

    def _message_sent(self, content: str, encrypted: bool) -> None:
        updated = self.stats.on_message_sent(content, encrypted)
        self.call_hooks("message_sent", content, encrypted)
        self.call_hooks("stats_updated", updated)

    def submit(self, content: str, encrypted: Optional[bool] = None) -> Optional[Message]:
        """Send a chat message.

        Args:
            content: Message text.
            encrypted: Encryption flag; the terminal toggle is used when None.

        Returns:
            The appended Message, or None if the content was blank.
        """
        if encrypted is None:
            encrypted = self.terminal.encrypted
        return self.exchange.submit(content, encrypted)

    def render(self) -> List[DrawCommand]:
        """Build the current frame and paint it onto the surface, if any."""
        now = self.env.now
        self.last_frame = render_frame(
            self.packets.packets,
            self.topology,
            now,
            self.config.transit_after,
            self.config.terminal_after,
        )
        draw_frame(self.surface, self.last_frame)
        self.call_hooks("frame_rendered", self.last_frame, now)
        return self.last_frame

    def resize(self, width: float, height: float) -> List[DrawCommand]:
        """Lay the mesh out on a new canvas size and re-render."""
        self.topology = self.topology.resized(width, height)
        logger.debug("Canvas resized to %sx%s", width, height)
        return self.render()

    def toggle_connection(self) -> bool:
        self.connected = not self.connected
        return self.connected

    def status_line(self) -> str:
        return format_status_line(self.stats.snapshot(), self.connected)

    def packet_log(self, limit: int = 5) -> List[str]:
        return format_packet_log(self.packets.recent(limit))

    def snapshot(self) -> Stats:
        return self.stats.snapshot()

    def run(self, duration: float) -> Stats:
        """Advance the session by ``duration`` milliseconds.

        Args:
            duration: Time to simulate in milliseconds.

        Returns:
            Stats snapshot at the end of the run.
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self.env.run(until=self.env.now + duration)
        return self.stats.snapshot()

    def teardown(self) -> None:
        """Stop every timer. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        for process in self.timers.values():
            # a timer tearing down from its own callback exits via the closed flag
            if process.is_alive and process is not self.env.active_process:
                process.interrupt("teardown")
        logger.info("Dashboard torn down at %.0f ms", self.env.now)

    def __enter__(self) -> "MeshDashboard":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.teardown()
