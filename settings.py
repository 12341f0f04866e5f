import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from bot_backend.errors import ConfigurationError

DEFAULT_CARDS_DIR = str(Path(__file__).resolve().parent / "cards")

# Alias camelCase que usa Bot Framework / Azure (compat Render)
_ALIASES = {
    "MICROSOFT_APP_ID": "MicrosoftAppId",
    "MICROSOFT_APP_PASSWORD": "MicrosoftAppPassword",
    "MICROSOFT_APP_TENANT_ID": "MicrosoftAppTenantId",
    "MICROSOFT_APP_TYPE": "MicrosoftAppType",
    "TO_CHANNEL_SCOPE": "ToChannelFromBotOAuthScope",
    "LUIS_APP_ID": "LuisAppId",
    "LUIS_API_KEY": "LuisAPIKey",
    "LUIS_ENDPOINT": "LuisAPIHostName",
}

_SECRETS = {"MICROSOFT_APP_PASSWORD", "LUIS_API_KEY", "APPLICATIONINSIGHTS_CONNECTION_STRING"}


def getenv(name: str, default: str = "", env: Optional[Mapping[str, str]] = None) -> str:
    # Acepta MAYÚSCULAS y camelCase
    env = os.environ if env is None else env
    val = env.get(name)
    if val is None and name in _ALIASES:
        val = env.get(_ALIASES[name])
    return val if val is not None else default


@dataclass(frozen=True)
class BotFrameworkConfig:
    """Objeto de configuración que lee ConfigurationBotFrameworkAuthentication (por atributos)."""
    APP_ID: str
    APP_PASSWORD: str
    APP_TENANTID: str
    APP_TYPE: str  # SingleTenant | MultiTenant | UserAssignedMSI
    TO_CHANNEL_FROM_BOT_OAUTH_SCOPE: str


@dataclass(frozen=True)
class Settings:
    app_id: str = ""
    app_password: str = ""
    app_tenant_id: str = ""
    app_type: str = "SingleTenant"
    to_channel_scope: str = "https://api.botframework.com/.default"
    appinsights_connection_string: str = ""
    luis_app_id: str = ""
    luis_api_key: str = ""
    luis_endpoint: str = ""
    luis_slot: str = "production"
    luis_timeout: float = 10.0
    cards_dir: str = DEFAULT_CARDS_DIR
    reply_text: str = "22 Hours"
    port: int = 8000

    def bot_framework_config(self) -> "BotFrameworkConfig":
        # Sin AppId el SDK trabaja en modo anónimo (Emulator); SingleTenant exigiría credenciales
        return BotFrameworkConfig(
            APP_ID=self.app_id,
            APP_PASSWORD=self.app_password,
            APP_TENANTID=self.app_tenant_id,
            APP_TYPE=self.app_type if self.app_id else "MultiTenant",
            TO_CHANNEL_FROM_BOT_OAUTH_SCOPE=self.to_channel_scope,
        )

    def validate(self) -> "Settings":
        """Falla si el servicio LUIS no está registrado (fatal al arrancar)."""
        missing = [
            name for name, value in (
                ("LUIS_APP_ID", self.luis_app_id),
                ("LUIS_API_KEY", self.luis_api_key),
                ("LUIS_ENDPOINT", self.luis_endpoint),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                "Configuración inválida: falta el servicio LUIS (" + ", ".join(missing) + ")"
            )
        if self.luis_timeout <= 0:
            raise ConfigurationError("LUIS_TIMEOUT debe ser mayor que 0")
        return self


def _number(name: str, raw: str, cast):
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} inválido: {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    def get(name: str, default: str = "") -> str:
        return getenv(name, default, env=env)

    endpoint = get("LUIS_ENDPOINT")
    if endpoint and not endpoint.startswith(("http://", "https://")):
        endpoint = "https://" + endpoint

    return Settings(
        app_id=get("MICROSOFT_APP_ID"),
        app_password=get("MICROSOFT_APP_PASSWORD"),
        app_tenant_id=get("MICROSOFT_APP_TENANT_ID"),
        app_type=get("MICROSOFT_APP_TYPE", "SingleTenant"),
        to_channel_scope=get("TO_CHANNEL_SCOPE", "https://api.botframework.com/.default"),
        appinsights_connection_string=get("APPLICATIONINSIGHTS_CONNECTION_STRING"),
        luis_app_id=get("LUIS_APP_ID"),
        luis_api_key=get("LUIS_API_KEY"),
        luis_endpoint=endpoint.rstrip("/"),
        luis_slot=get("LUIS_SLOT", "production"),
        luis_timeout=_number("LUIS_TIMEOUT", get("LUIS_TIMEOUT", "10"), float),
        cards_dir=get("CARDS_DIR", DEFAULT_CARDS_DIR),
        reply_text=get("REPLY_TEXT", "22 Hours"),
        port=_number("PORT", get("PORT", "8000"), int),
    )


def public_env_snapshot(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    keys = [
        "MICROSOFT_APP_ID", "MICROSOFT_APP_PASSWORD", "MICROSOFT_APP_TENANT_ID", "MICROSOFT_APP_TYPE",
        "APPLICATIONINSIGHTS_CONNECTION_STRING", "LUIS_APP_ID", "LUIS_API_KEY", "LUIS_ENDPOINT",
        "LUIS_SLOT", "CARDS_DIR", "PORT",
    ]
    out = {}
    for k in keys:
        v = getenv(k, env=env)
        if not v:
            out[k] = "MISSING"
        elif k in _SECRETS:
            out[k] = "SET(***masked***)"
        else:
            out[k] = v
    return out
