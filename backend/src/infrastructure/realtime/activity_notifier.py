"""
Socket.IO Activity Notifier
Pushes last_activity_at changes to the owner's room
"""
from datetime import datetime

import socketio

from application.services.lifecycle.interfaces import IActivityNotifier
from domain.entities import Application


ACTIVITY_EVENT = "application_activity"


class SocketIOActivityNotifier(IActivityNotifier):

    def __init__(self, server: socketio.AsyncServer):
        self.server = server

    async def activity_changed(self, application: Application, last_activity_at: datetime) -> None:
        await self.server.emit(
            ACTIVITY_EVENT,
            {
                "application_id": str(application.id),
                "stage": application.stage,
                "milestone": application.milestone.value,
                "last_activity_at": last_activity_at.isoformat(),
            },
            room=str(application.user_id),
        )
