# services/realtime.py
"""Per-user fan-out of live updates over WebSockets.

Delivery is best effort: an event published while a user has no open
socket is dropped, and clients reconcile by re-fetching.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from fastapi import WebSocket, WebSocketDisconnect

from ..schemas.events import BudgetUpdated, ExpenseAdded

logger = logging.getLogger(__name__)

EXPENSE_ADDED = "expense_added"
BUDGET_UPDATED = "budget_updated"
CONNECTED = "connected"


def group_name(user_id) -> str:
    return f"user:{user_id}"


class ConnectionManager:
    """Live sockets grouped by owning user.

    Only touched from the event loop, so no locking.
    """

    def __init__(self):
        self.groups: Dict[str, Set[WebSocket]] = defaultdict(set)

    def join(self, user_id, websocket: WebSocket) -> None:
        self.groups[group_name(user_id)].add(websocket)
        logger.info(f"Socket joined {group_name(user_id)} ({self.connection_count(user_id)} open)")

    def leave(self, user_id, websocket: WebSocket) -> None:
        name = group_name(user_id)
        group = self.groups.get(name)
        if group is None:
            return
        group.discard(websocket)
        if not group:
            del self.groups[name]
        logger.info(f"Socket left {name}")

    def connection_count(self, user_id) -> int:
        return len(self.groups.get(group_name(user_id), ()))

    async def send_to_user(self, user_id, event: str, data: dict) -> int:
        """Push one event to every socket of a user. Returns the delivery count."""
        group = self.groups.get(group_name(user_id))
        if not group:
            logger.debug(f"No listeners for {group_name(user_id)}, dropping {event}")
            return 0

        message = {"event": event, "data": data}
        delivered = 0
        for websocket in list(group):
            try:
                await websocket.send_json(message)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                logger.info(f"Dropping dead socket in {group_name(user_id)}: {exc!r}")
                self.leave(user_id, websocket)
        return delivered


def expense_events(expense, budget=None) -> List[Tuple[str, dict]]:
    """Payloads for expense_added, plus budget_updated when a budget was decremented.

    Built eagerly so they can be sent after the request's session is closed.
    """
    events = [(EXPENSE_ADDED, ExpenseAdded.model_validate(expense).model_dump(mode="json", by_alias=True))]
    if budget is not None:
        events.append(
            (BUDGET_UPDATED, BudgetUpdated.model_validate(budget).model_dump(mode="json", by_alias=True))
        )
    return events


async def publish(notifier, user_id, events: List[Tuple[str, dict]]) -> None:
    for event, data in events:
        await notifier.send_to_user(user_id, event, data)
