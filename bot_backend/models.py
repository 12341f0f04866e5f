# bot_backend/models.py — Registros de entrada/salida de un turno
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"


class EventKind(str, Enum):
    MESSAGE = "message"
    SESSION_START = "session_start"
    OTHER = "other"


@dataclass(frozen=True)
class InboundEvent:
    kind: EventKind
    kind_name: str                       # tipo crudo del canal ("message", "typing", ...)
    text: Optional[str] = None
    participants: Tuple[str, ...] = ()   # ids de miembros agregados, en orden
    recipient_id: str = ""               # el propio bot
    conversation_id: str = ""


@dataclass(frozen=True)
class TopIntent:
    name: str
    confidence: float


@dataclass(frozen=True)
class RecognitionResult:
    top_intent: Optional[TopIntent] = None
    entities: Mapping[str, Optional[Sequence[Any]]] = field(default_factory=dict)

    def first_entity(self, entity_type: str) -> Optional[Any]:
        """Primer valor extraído para `entity_type`, o None si no hay ninguno.

        Una clave ausente es lo normal (LUIS omite entidades no detectadas).
        """
        values = self.entities.get(entity_type)
        if not values:
            return None
        return values[0]


@dataclass(frozen=True)
class CardPayload:
    name: str
    content: Dict[str, Any]


@dataclass(frozen=True)
class OutboundReply:
    text: Optional[str] = None
    attachment: Optional[CardPayload] = None
