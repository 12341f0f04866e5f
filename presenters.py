# presenters.py — Traducción entre Activity (Bot Framework) y los registros del turno
import copy

from botbuilder.core import CardFactory, MessageFactory
from botbuilder.schema import Activity, ActivityTypes

from bot_backend.models import EventKind, InboundEvent, OutboundReply

_KINDS = {
    ActivityTypes.message.value: EventKind.MESSAGE,
    ActivityTypes.conversation_update.value: EventKind.SESSION_START,
}


def to_inbound_event(activity: Activity) -> InboundEvent:
    # activity.type puede venir como ActivityTypes o como str crudo del canal
    kind_name = str(getattr(activity.type, "value", activity.type) or "")
    members = getattr(activity, "members_added", None) or []
    recipient = getattr(activity, "recipient", None)
    conv = getattr(activity, "conversation", None)
    return InboundEvent(
        kind=_KINDS.get(kind_name, EventKind.OTHER),
        kind_name=kind_name,
        text=activity.text,
        participants=tuple(m.id for m in members if m is not None),
        recipient_id=getattr(recipient, "id", None) or "",
        conversation_id=getattr(conv, "id", None) or "",
    )


def to_activity(reply: OutboundReply) -> Activity:
    if reply.attachment is None:
        return MessageFactory.text(reply.text or "")
    # Copia profunda: la tarjeta cargada al arrancar no se toca nunca
    card = CardFactory.adaptive_card(copy.deepcopy(reply.attachment.content))
    return MessageFactory.attachment(card, text=reply.text)
