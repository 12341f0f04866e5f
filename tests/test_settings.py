import pytest

from bot_backend.errors import ConfigurationError
from settings import DEFAULT_CARDS_DIR, load_settings, public_env_snapshot

LUIS_ENV = {
    "LUIS_APP_ID": "app-123",
    "LUIS_API_KEY": "secret",
    "LUIS_ENDPOINT": "westus.api.cognitive.microsoft.com",
}


def test_defaults() -> None:
    settings = load_settings({})

    assert settings.app_type == "SingleTenant"
    assert settings.luis_slot == "production"
    assert settings.luis_timeout == 10.0
    assert settings.cards_dir == DEFAULT_CARDS_DIR
    assert settings.reply_text == "22 Hours"
    assert settings.port == 8000


def test_camel_case_aliases_and_endpoint_scheme() -> None:
    settings = load_settings({
        "MicrosoftAppId": "bot-id",
        "LuisAppId": "app-123",
        "LuisAPIKey": "secret",
        "LuisAPIHostName": "westus.api.cognitive.microsoft.com/",
    })

    assert settings.app_id == "bot-id"
    assert settings.luis_app_id == "app-123"
    assert settings.luis_endpoint == "https://westus.api.cognitive.microsoft.com"
    assert settings.bot_framework_config().APP_ID == "bot-id"
    assert settings.bot_framework_config().APP_TYPE == "SingleTenant"


def test_anonymous_bot_framework_config_is_multi_tenant() -> None:
    assert load_settings({}).bot_framework_config().APP_TYPE == "MultiTenant"


def test_validate_accepts_complete_luis_config() -> None:
    assert load_settings(LUIS_ENV).validate().luis_app_id == "app-123"


def test_validate_lists_missing_luis_variables() -> None:
    with pytest.raises(ConfigurationError, match="LUIS_API_KEY, LUIS_ENDPOINT"):
        load_settings({"LUIS_APP_ID": "app-123"}).validate()


def test_invalid_number_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="LUIS_TIMEOUT"):
        load_settings({"LUIS_TIMEOUT": "soon"})


def test_snapshot_masks_secrets() -> None:
    snap = public_env_snapshot({**LUIS_ENV, "MICROSOFT_APP_PASSWORD": "pw"})

    assert snap["LUIS_API_KEY"] == "SET(***masked***)"
    assert snap["MICROSOFT_APP_PASSWORD"] == "SET(***masked***)"
    assert snap["LUIS_APP_ID"] == "app-123"
    assert snap["MICROSOFT_APP_ID"] == "MISSING"
