"""
📡 Monitors - Polling-based stream status monitoring
"""
from .stream_monitor import MonitorState, StreamMonitor

__all__ = ["MonitorState", "StreamMonitor"]
