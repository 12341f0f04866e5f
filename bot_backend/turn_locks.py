# bot_backend/turn_locks.py — Un turno a la vez por conversación
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ConversationTurnLocks:
    """Serializa los turnos de una misma conversación (orden FIFO de llegada).

    Conversaciones distintas avanzan en paralelo. Las entradas se eliminan
    cuando ningún turno tiene ni espera el lock.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, conversation_id: str) -> AsyncIterator[None]:
        if not conversation_id:
            yield
            return

        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._users[conversation_id] = self._users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[conversation_id] -= 1
            if self._users[conversation_id] == 0:
                del self._users[conversation_id]
                del self._locks[conversation_id]
