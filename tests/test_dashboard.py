import matplotlib.pyplot as plt
import pytest
import simpy

from echo_mesh.config import DashboardConfig
from echo_mesh.core.enums import MessageSender
from echo_mesh.core.simulator import MeshDashboard
from echo_mesh.utils.visualization import Clear


def test_packet_timer_runs_every_800ms(dashboard):
    # events at the run horizon itself are not processed
    dashboard.run(800)
    assert dashboard.packets.created == 0
    dashboard.run(1)
    assert dashboard.packets.created == 1
    dashboard.run(8000)
    assert dashboard.packets.created == 11


def test_window_is_bounded(dashboard):
    dashboard.run(800 * 40)
    assert len(dashboard.packets.packets) == 20


def test_stats_tick_every_second(dashboard):
    updates = []
    dashboard.register_hook("stats_updated", updates.append)
    dashboard.run(5001)
    assert len(updates) == 5
    assert 8 <= dashboard.snapshot().latency_ms <= 28


def test_each_generation_tick_renders_a_frame(dashboard):
    frames = []
    dashboard.register_hook("frame_rendered", lambda commands, now: frames.append(now))
    dashboard.run(4001)
    assert frames == [800, 1600, 2400, 3200, 4000]
    assert isinstance(dashboard.last_frame[0], Clear)


def test_remote_messages_wait_for_first_local_message():
    config = DashboardConfig(seed=3, remote_probability=1.0)
    with MeshDashboard(config) as dashboard:
        dashboard.run(8000)
        assert len(dashboard.exchange) == 0

        dashboard.submit("hello")
        dashboard.run(1001)
        senders = [m.sender for m in dashboard.exchange.messages]
        assert senders == [MessageSender.LOCAL, MessageSender.REMOTE]


def test_submit_updates_stats_and_notifies(dashboard):
    sent = []
    dashboard.register_hook("message_sent", lambda *args: sent.append(args))
    before = dashboard.snapshot()

    message = dashboard.submit("hello", True)

    after = dashboard.snapshot()
    assert message.sender is MessageSender.LOCAL
    assert sent == [("hello", True)]
    assert after.bytes_transferred - before.bytes_transferred == 10
    assert after.packets_transmitted - before.packets_transmitted == 1


def test_blank_submit_changes_nothing(dashboard):
    sent = []
    dashboard.register_hook("message_sent", lambda *args: sent.append(args))
    assert dashboard.submit("   ", False) is None
    assert len(dashboard.exchange) == 0
    assert sent == []
    assert dashboard.snapshot().packets_transmitted == 0


def test_submit_uses_terminal_toggle(dashboard):
    dashboard.terminal.toggle_encryption()
    assert dashboard.submit("plain").encrypted is False


def test_teardown_stops_all_timers(dashboard):
    dashboard.submit("hi")
    dashboard.run(2000)
    created = dashboard.packets.created
    stats = dashboard.snapshot()
    messages = len(dashboard.exchange)

    dashboard.teardown()
    dashboard.teardown()
    dashboard.run(20000)

    assert dashboard.packets.created == created
    assert dashboard.snapshot() == stats
    assert len(dashboard.exchange) == messages
    assert not any(p.is_alive for p in dashboard.timers.values())


def test_teardown_from_inside_a_tick(dashboard):
    dashboard.register_hook("packets_updated", lambda packets, now: dashboard.teardown())
    dashboard.run(5000)
    assert dashboard.packets.created == 1
    assert not any(p.is_alive for p in dashboard.timers.values())


def test_resize_rerenders(dashboard):
    commands = dashboard.resize(800, 600)
    assert commands[0] == Clear(800, 600)
    assert dashboard.topology.center == (400, 300)


def test_surface_is_painted():
    fig, ax = plt.subplots()
    with MeshDashboard(DashboardConfig(seed=2), surface=ax) as dashboard:
        dashboard.run(801)
    assert len(ax.lines) >= 28
    plt.close(fig)


def test_same_seed_replays_same_session():
    def trace(seed):
        with MeshDashboard(DashboardConfig(seed=seed)) as dashboard:
            dashboard.submit("hi")
            dashboard.run(12000)
            return (
                [(p.sender, p.receiver, p.size, p.status) for p in dashboard.packets.packets],
                dashboard.snapshot(),
                [m.content for m in dashboard.exchange.messages],
            )

    assert trace(42) == trace(42)


def test_status_line_and_connection_toggle(dashboard):
    assert dashboard.status_line().startswith("MESH ACTIVE")
    assert dashboard.toggle_connection() is False
    assert dashboard.status_line().startswith("DISCONNECTED")


def test_packet_log_lists_newest_first(dashboard):
    dashboard.run(4001)
    lines = dashboard.packet_log()
    assert len(lines) == 5
    assert lines[0].startswith("[  pending]")


def test_shared_environment():
    env = simpy.Environment()
    with MeshDashboard(DashboardConfig(seed=1), env=env) as dashboard:
        env.run(until=1601)
        assert dashboard.packets.created == 2


def test_run_rejects_non_positive_duration(dashboard):
    with pytest.raises(ValueError):
        dashboard.run(0)


def test_unknown_hook_raises(dashboard):
    with pytest.raises(ValueError):
        dashboard.register_hook("scrolled", print)


def test_render_uses_configured_transit_window():
    config = DashboardConfig(
        seed=3,
        transit_after=2000,
        terminal_after=6000,
        packet_period=100_000,
        allow_loopback=False,
    )
    with MeshDashboard(config) as session:
        packet = session.packets.create_packet(0)
        session.run(2401)
        session.packets.recompute_statuses(session.env.now)
        marker = session.render()[-1]

    start = session.topology.position(packet.sender)
    end = session.topology.position(packet.receiver)
    # 401 ms into a 4000 ms transit
    expected = (
        start[0] + (end[0] - start[0]) * 401 / 4000,
        start[1] + (end[1] - start[1]) * 401 / 4000,
    )
    assert marker.center == pytest.approx(expected)


def test_zero_size_span_gives_fixed_packet_size():
    config = DashboardConfig(seed=8, min_packet_size=128, packet_size_span=0)
    with MeshDashboard(config) as session:
        session.run(8001)
        sizes = {packet.size for packet in session.packets.packets}
    assert sizes == {128}
