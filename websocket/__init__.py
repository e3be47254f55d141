"""
WebSocket module for algoviz.

Provides real-time runner statistics, running-state and settings updates
via WebSocket connections.
"""

from .manager import (
    SESSION_CHANNEL,
    WebSocketManager,
    WebSocketMessage,
    MessageType,
    ws_manager,
    notify_runner_selected,
    notify_runner_stats,
    notify_runner_running,
    notify_settings_changed,
)

__all__ = [
    "SESSION_CHANNEL",
    "WebSocketManager",
    "WebSocketMessage",
    "MessageType",
    "ws_manager",
    "notify_runner_selected",
    "notify_runner_stats",
    "notify_runner_running",
    "notify_settings_changed",
]
