# bot.py — Bot LUIS: cada Activity pasa por el TurnDispatcher
import logging

from botbuilder.core import ActivityHandler, TurnContext

from bot_backend.dispatcher import TurnDispatcher
from bot_backend.errors import TransportError
from bot_backend.models import OutboundReply
from bot_backend.turn_locks import ConversationTurnLocks
from presenters import to_activity, to_inbound_event

log = logging.getLogger("luis-bot.bot")


class TurnContextTransport:
    """Entrega las respuestas por el TurnContext del turno en curso."""

    def __init__(self, turn_context: TurnContext):
        self.turn_context = turn_context

    async def send(self, reply: OutboundReply) -> None:
        try:
            await self.turn_context.send_activity(to_activity(reply))
        except Exception as e:
            raise TransportError(f"No se pudo enviar la respuesta: {e!r}") from e


class LuisBot(ActivityHandler):
    def __init__(self, dispatcher: TurnDispatcher, turn_locks: ConversationTurnLocks | None = None):
        self.dispatcher = dispatcher
        self.turn_locks = turn_locks or ConversationTurnLocks()

    async def on_turn(self, turn_context: TurnContext):
        event = to_inbound_event(turn_context.activity)
        log.debug("turno kind=%s conv=%s", event.kind_name, event.conversation_id)
        async with self.turn_locks.hold(event.conversation_id):
            await self.dispatcher.handle_turn(event, TurnContextTransport(turn_context))
