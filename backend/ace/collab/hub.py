"""
CollaborationHub: in-memory relay for live table editing.

Clients join a model, receive a snapshot of its rows plus who else is
present, and send cell patches that are applied to the shared rows and
broadcast to every connection.  No conflict resolution, persistence or
backfill: the last patch to reach the hub wins.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol

from starlette.websockets import WebSocketDisconnect

from ace.core.logging import get_logger

logger = get_logger(__name__)

ANONYMOUS_USER = "anon"
# Upper bound on rowId so one patch cannot allocate an arbitrarily long row list
MAX_ROWS = 10_000


class JsonSocket(Protocol):
    async def send_json(self, data: Any) -> None: ...


@dataclass(eq=False)
class Participant:
    """One open connection and the model/user it joined as."""

    socket: JsonSocket
    model_id: str | None = None
    user: str | None = None


@dataclass
class CollaborationHub:
    participants: list[Participant] = field(default_factory=list)
    rows: dict[str, list[dict[str, Any] | None]] = field(default_factory=dict)
    presence: dict[str, list[str]] = field(default_factory=dict)

    def connect(self, socket: JsonSocket) -> Participant:
        participant = Participant(socket=socket)
        self.participants.append(participant)
        return participant

    async def disconnect(self, participant: Participant) -> None:
        if participant in self.participants:
            self.participants.remove(participant)
        if participant.model_id and participant.user:
            self._leave(participant)
            await self.broadcast_presence(participant.model_id)

    def snapshot(self, model_id: str) -> list[dict[str, Any] | None]:
        return list(self.rows.get(model_id, []))

    # ─── Messages ──────────────────────────────────────

    async def handle_message(self, participant: Participant, raw: str) -> None:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Ignoring malformed relay message")
            return
        if not isinstance(message, dict):
            return

        kind = message.get("type")
        if kind == "join":
            await self._join(participant, message)
        elif kind == "patch":
            await self._patch(participant, message)

    async def _join(self, participant: Participant, message: dict[str, Any]) -> None:
        model_id = message.get("modelId")
        if not isinstance(model_id, str) or not model_id:
            return
        if participant.model_id and participant.user:
            self._leave(participant)

        participant.model_id = model_id
        participant.user = str(message.get("user") or ANONYMOUS_USER)
        users = self.presence.setdefault(model_id, [])
        if participant.user not in users:
            users.append(participant.user)
        logger.info("Relay join", model_id=model_id, user=participant.user)

        await self.broadcast_presence(model_id)
        await self._send(participant, {
            "type": "snapshot",
            "modelId": model_id,
            "items": self.snapshot(model_id),
            "presence": list(users),
        })

    async def _patch(self, participant: Participant, message: dict[str, Any]) -> None:
        model_id = message.get("modelId")
        edits = message.get("edits") or []
        if not isinstance(model_id, str) or not isinstance(edits, list):
            return

        rows = self.rows.setdefault(model_id, [])
        applied = [edit for edit in edits if self._apply_edit(rows, edit)]
        await self.broadcast({
            "type": "patch",
            "modelId": model_id,
            "edits": applied,
            "user": message.get("user") or participant.user or ANONYMOUS_USER,
        })

    @staticmethod
    def _apply_edit(rows: list[dict[str, Any] | None], edit: Any) -> bool:
        if not isinstance(edit, dict):
            return False
        row_id = edit.get("rowId")
        key = edit.get("key")
        if isinstance(row_id, bool) or not isinstance(row_id, int) or not 0 <= row_id < MAX_ROWS:
            return False
        if not isinstance(key, str):
            return False

        if row_id >= len(rows):
            rows.extend([None] * (row_id + 1 - len(rows)))
        row = dict(rows[row_id] or {})
        row[key] = edit.get("newValue")
        rows[row_id] = row
        return True

    def _leave(self, participant: Participant) -> None:
        users = self.presence.get(participant.model_id, [])
        if participant.user in users:
            users.remove(participant.user)

    # ─── Fan-out ───────────────────────────────────────

    async def broadcast_presence(self, model_id: str) -> None:
        await self.broadcast({
            "type": "presence",
            "modelId": model_id,
            "users": list(self.presence.get(model_id, [])),
        })

    async def broadcast(self, payload: dict[str, Any]) -> None:
        for participant in list(self.participants):
            await self._send(participant, payload)

    async def _send(self, participant: Participant, payload: dict[str, Any]) -> None:
        try:
            await participant.socket.send_json(payload)
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            logger.info("Dropping dead relay connection", user=participant.user, error=str(exc))
            if participant in self.participants:
                self.participants.remove(participant)
