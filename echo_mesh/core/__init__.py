"""Core components for the mesh dashboard.

This module contains the simulators and models driven by the dashboard's event
loop, including Packet, Topology, MessageExchange, StatsAccumulator and
MeshDashboard.
"""
