# bot_backend/cards.py — Catálogo de Adaptive Cards (se carga una sola vez al arrancar)
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .errors import ConfigurationError
from .models import CardPayload

logger = logging.getLogger("luis-bot.cards")

WELCOME_CARD_FILE = "welcomeCard.json"
DID_NOT_UNDERSTAND_CARD_FILE = "didNotUnderstandCard.json"


def _validate_card(name: str, content: Any) -> Dict[str, Any]:
    if not isinstance(content, dict):
        raise ConfigurationError(f"Tarjeta '{name}': se esperaba un objeto JSON")
    if content.get("type") != "AdaptiveCard":
        raise ConfigurationError(f"Tarjeta '{name}': type debe ser 'AdaptiveCard'")
    if not isinstance(content.get("version"), str):
        raise ConfigurationError(f"Tarjeta '{name}': falta 'version'")
    return content


def load_card(path: Union[str, Path]) -> CardPayload:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"No se pudo leer la tarjeta {path}: {e}") from e
    try:
        content = json.loads(raw)
    except ValueError as e:
        raise ConfigurationError(f"Tarjeta {path} no es JSON válido: {e}") from e
    return CardPayload(name=path.stem, content=_validate_card(path.name, content))


@dataclass(frozen=True)
class CardCatalog:
    welcome: CardPayload
    did_not_understand: CardPayload

    @classmethod
    def load(cls, cards_dir: Union[str, Path]) -> "CardCatalog":
        cards_dir = Path(cards_dir)
        catalog = cls(
            welcome=load_card(cards_dir / WELCOME_CARD_FILE),
            did_not_understand=load_card(cards_dir / DID_NOT_UNDERSTAND_CARD_FILE),
        )
        logger.info("[CARDS] cargadas desde %s", cards_dir)
        return catalog
