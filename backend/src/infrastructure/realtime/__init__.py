"""Real-time push over Socket.IO"""
from .socket_server import sio
from .activity_notifier import SocketIOActivityNotifier

__all__ = ["sio", "SocketIOActivityNotifier"]
