# luis_client.py — Cliente del endpoint de predicción LUIS v3
import logging
from typing import Any, Dict, Optional

import httpx

from bot_backend.errors import RecognitionError
from bot_backend.models import RecognitionResult, TopIntent

log = logging.getLogger("luis-bot.luis")

PREDICT_PATH = "/luis/prediction/v3.0/apps/{app_id}/slots/{slot}/predict"


def parse_prediction(data: Any) -> RecognitionResult:
    """Convierte la respuesta JSON de LUIS en RecognitionResult.

    Cualquier forma inesperada es RecognitionError: el turno se aborta sin responder.
    """
    if not isinstance(data, dict) or not isinstance(data.get("prediction"), dict):
        raise RecognitionError("Respuesta de LUIS sin 'prediction'")
    prediction = data["prediction"]

    intents = prediction.get("intents")
    if intents is None:
        intents = {}
    if not isinstance(intents, dict):
        raise RecognitionError(f"'intents' de LUIS no es un objeto: {type(intents).__name__}")
    entities_raw = prediction.get("entities")
    if entities_raw is None:
        entities_raw = {}
    if not isinstance(entities_raw, dict):
        raise RecognitionError(f"'entities' de LUIS no es un objeto: {type(entities_raw).__name__}")

    top_intent: Optional[TopIntent] = None
    name = prediction.get("topIntent")
    if name:
        if not isinstance(name, str):
            raise RecognitionError(f"'topIntent' de LUIS no es texto: {name!r}")
        entry = intents.get(name)
        if entry is None:
            log.debug("[LUIS] topIntent=%s sin entrada en 'intents'; score=0.0", name)
            entry = {}
        if not isinstance(entry, dict):
            raise RecognitionError(f"Intent {name} mal formado: {entry!r}")
        score = entry.get("score", 0.0)
        try:
            top_intent = TopIntent(name=name, confidence=float(score))
        except (TypeError, ValueError) as e:
            raise RecognitionError(f"Score inválido para intent {name}: {score!r}") from e

    entities: Dict[str, Any] = {}
    for key, values in entities_raw.items():
        if key == "$instance":  # metadatos de posición, no son valores
            continue
        entities[key] = values if isinstance(values, list) else [values]

    return RecognitionResult(top_intent=top_intent, entities=entities)


class LuisRecognizer:
    def __init__(
        self,
        app_id: str,
        api_key: str,
        endpoint: str,
        slot: str = "production",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.app_id = app_id
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.slot = slot
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @property
    def predict_url(self) -> str:
        return self.endpoint + PREDICT_PATH.format(app_id=self.app_id, slot=self.slot)

    async def recognize(self, text: str) -> RecognitionResult:
        t = (text or "").strip()
        if not t:
            # LUIS rechaza consultas vacías; equivale a "sin intent"
            return RecognitionResult()

        params = {"query": t, "show-all-intents": "true"}
        headers = {"Ocp-Apim-Subscription-Key": self.api_key}
        try:
            r = await self._client.get(self.predict_url, params=params, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            log.warning("[LUIS] error de red: %r", e)
            raise RecognitionError(f"LUIS no respondió: {e!r}") from e

        if r.status_code >= 400:
            log.warning("[LUIS] HTTP %s: %s", r.status_code, r.text[:300])
            raise RecognitionError(f"LUIS respondió HTTP {r.status_code}")

        try:
            data = r.json()
        except ValueError as e:
            raise RecognitionError("Respuesta de LUIS no es JSON") from e

        result = parse_prediction(data)
        log.debug("[LUIS] query=%r top=%s", t, result.top_intent)
        return result

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
