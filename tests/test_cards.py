import json

import pytest

from bot_backend.cards import CardCatalog, load_card
from bot_backend.errors import ConfigurationError

from conftest import CARDS_DIR


def test_bundled_cards_load() -> None:
    catalog = CardCatalog.load(CARDS_DIR)

    assert catalog.welcome.name == "welcomeCard"
    assert catalog.did_not_understand.name == "didNotUnderstandCard"
    assert catalog.welcome.content["type"] == "AdaptiveCard"


def test_missing_card_is_configuration_error(tmp_path) -> None:
    (tmp_path / "welcomeCard.json").write_text(json.dumps({"type": "AdaptiveCard", "version": "1.0"}))

    with pytest.raises(ConfigurationError, match="didNotUnderstandCard"):
        CardCatalog.load(tmp_path)


def test_malformed_json_is_configuration_error(tmp_path) -> None:
    path = tmp_path / "welcomeCard.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="JSON"):
        load_card(path)


@pytest.mark.parametrize(
    "content",
    [
        [],
        {"type": "HeroCard", "version": "1.0"},
        {"type": "AdaptiveCard"},
    ],
)
def test_invalid_card_document_is_rejected(tmp_path, content) -> None:
    path = tmp_path / "card.json"
    path.write_text(json.dumps(content))

    with pytest.raises(ConfigurationError):
        load_card(path)
