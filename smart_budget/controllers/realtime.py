# controllers/realtime.py
"""Live update channel.

The socket authenticates once during the handshake and then only
receives events; anything the client sends is ignored.
"""

import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from jose import JWTError

from ..auth import decode_access_token, get_jwt_secret
from ..services.realtime import CONNECTED

logger = logging.getLogger(__name__)

router = APIRouter()


def handshake_token(websocket: WebSocket) -> Optional[str]:
    """Bearer token from the Authorization header or the ``token`` query parameter."""
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return websocket.query_params.get("token")


@router.websocket("/ws")
async def live_updates(websocket: WebSocket):
    token = handshake_token(websocket)
    secret = get_jwt_secret()
    if not token or not secret:
        logger.warning("Refusing socket without credentials")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        identity = decode_access_token(token, secret)
    except JWTError:
        logger.warning("Refusing socket with invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    manager = websocket.app.state.notifier
    await websocket.accept()
    manager.join(identity.user_id, websocket)
    try:
        await websocket.send_json({"event": CONNECTED, "data": {"userId": identity.user_id}})
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        pass
    finally:
        manager.leave(identity.user_id, websocket)
