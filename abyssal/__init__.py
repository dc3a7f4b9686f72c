"""
Abyssal Explorer Engine

A headless world model and simulation engine for a submarine exploring
an abyssal ocean grid. Cells carry depth, pressure, biome, hazards, life
and currents; the session resolves drift, damage, sonar and missions.

Architecture: the engine is the source of truth. Renderers and HUDs are
consumers of its state.
"""

__version__ = "0.1.0"
