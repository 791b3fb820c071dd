"""
Environmental control systems for smart-office.

Provides occupancy-driven AC and lighting control:
- ControlSystem: idempotent per-room on/off observer
- AirConditioningSystem, LightingSystem: the two built-in systems
- ControlAdapter: where the actual switching happens (host supplied)
"""

from .adapter import ControlAdapter, LoggingControlAdapter, MockControlAdapter
from .control import AirConditioningSystem, ControlSystem, LightingSystem

__all__ = [
    "AirConditioningSystem",
    "ControlAdapter",
    "ControlSystem",
    "LightingSystem",
    "LoggingControlAdapter",
    "MockControlAdapter",
]
