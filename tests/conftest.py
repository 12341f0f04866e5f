from __future__ import annotations

from pathlib import Path

import pytest

from bot_backend.cards import CardCatalog
from bot_backend.errors import RecognitionError
from bot_backend.models import CardPayload, OutboundReply, RecognitionResult, TopIntent

CARDS_DIR = Path(__file__).resolve().parent.parent / "cards"


class FakeRecognizer:
    def __init__(self, result: RecognitionResult | None = None, error: Exception | None = None) -> None:
        self.result = result or RecognitionResult()
        self.error = error
        self.queries: list[str] = []

    async def recognize(self, text: str) -> RecognitionResult:
        self.queries.append(text)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingTransport:
    def __init__(self) -> None:
        self.sent: list[OutboundReply] = []

    async def send(self, reply: OutboundReply) -> None:
        self.sent.append(reply)


def intent(name: str, score: float = 0.9, **entities) -> RecognitionResult:
    return RecognitionResult(top_intent=TopIntent(name=name, confidence=score), entities=entities)


@pytest.fixture
def cards() -> CardCatalog:
    return CardCatalog(
        welcome=CardPayload(name="welcomeCard", content={"type": "AdaptiveCard", "version": "1.0", "body": []}),
        did_not_understand=CardPayload(
            name="didNotUnderstandCard", content={"type": "AdaptiveCard", "version": "1.0", "body": []}
        ),
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def failing_recognizer() -> FakeRecognizer:
    return FakeRecognizer(error=RecognitionError("timeout"))
