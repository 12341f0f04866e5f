# bot_backend/dispatcher.py — Ruteo de un turno: mensaje / inicio de sesión / otro evento
import logging
from typing import Protocol

from .cards import CardCatalog
from .models import EventKind, InboundEvent, OutboundReply, RecognitionResult

logger = logging.getLogger("luis-bot.dispatcher")

DEFAULT_REPLY_TEXT = "22 Hours"
NONE_INTENT = "None"


class Recognizer(Protocol):
    async def recognize(self, text: str) -> RecognitionResult: ...


class Transport(Protocol):
    async def send(self, reply: OutboundReply) -> None: ...


class TurnDispatcher:
    """Decide qué responder para cada evento entrante.

    No guarda estado entre turnos. Los errores de LUIS (RecognitionError) y del
    canal (TransportError) se propagan al llamador y abortan el turno.
    """

    def __init__(
        self,
        recognizer: Recognizer,
        cards: CardCatalog,
        reply_text: str = DEFAULT_REPLY_TEXT,
        none_intent: str = NONE_INTENT,
    ):
        self.recognizer = recognizer
        self.cards = cards
        self.reply_text = reply_text
        self.none_intent = none_intent

    async def handle_turn(self, event: InboundEvent, transport: Transport) -> None:
        if event.kind == EventKind.MESSAGE:
            await self._on_message(event, transport)
        elif event.kind == EventKind.SESSION_START:
            await self._on_session_start(event, transport)
        else:
            await transport.send(OutboundReply(text=event.kind_name))

    async def _on_message(self, event: InboundEvent, transport: Transport) -> None:
        # Único punto de suspensión antes de enviar: si se cancela aquí no sale nada
        result = await self.recognizer.recognize(event.text or "")

        number = result.first_entity("number")
        if number is not None:
            logger.debug("entidad number=%s", number)

        top = result.top_intent
        if top is not None and top.name != self.none_intent:
            logger.info("intent=%s score=%.2f", top.name, top.confidence)
            await transport.send(OutboundReply(text=self.reply_text))
        else:
            logger.info("sin intent reconocido; se envía tarjeta de ayuda")
            await transport.send(OutboundReply(attachment=self.cards.did_not_understand))

    async def _on_session_start(self, event: InboundEvent, transport: Transport) -> None:
        for member_id in event.participants:
            if member_id != event.recipient_id:
                await transport.send(OutboundReply(attachment=self.cards.welcome))
