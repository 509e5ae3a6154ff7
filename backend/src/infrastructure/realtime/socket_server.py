"""
Socket.IO Server
Clients authenticate with their user id and join a room named after it
"""
import socketio
from loguru import logger

from core.config import settings


sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins=settings.CORS_ORIGINS,
    logger=settings.DEBUG,
    engineio_logger=settings.DEBUG
)


@sio.event
async def connect(sid, environ):
    """Handle client connection"""
    logger.info(f"🔌 Client connected: {sid}")


@sio.event
async def disconnect(sid):
    """Handle client disconnection"""
    logger.info(f"🔌 Client disconnected: {sid}")


@sio.event
async def authenticate(sid, data):
    """Join the caller's user room"""
    user_id = (data or {}).get('user_id')
    if user_id:
        await sio.enter_room(sid, str(user_id))
        await sio.emit('authenticated', {'status': 'success'}, room=sid)
        logger.info(f"✅ User {user_id} authenticated in room")
    else:
        await sio.emit('authenticated', {'status': 'error', 'detail': 'user_id required'}, room=sid)
