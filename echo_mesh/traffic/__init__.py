"""Traffic generation for the mesh dashboard.

This module provides factories for synthetic packet attributes, packet
outcomes and remote chat responses.
"""
