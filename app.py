# app.py — Bot LUIS con CloudAdapter (aiohttp) + Diagnóstico y App Insights
import os
import logging
from typing import Optional

from aiohttp import web

from botbuilder.core import TurnContext, TelemetryLoggerMiddleware
from botbuilder.schema import Activity
from botbuilder.integration.aiohttp.cloud_adapter import CloudAdapter
from botbuilder.integration.aiohttp.configuration_bot_framework_authentication import (
    ConfigurationBotFrameworkAuthentication,
)

# Telemetría (Application Insights)
# Docs: ApplicationInsightsTelemetryClient + TelemetryLoggerMiddleware
# https://learn.microsoft.com/python/api/botbuilder-applicationinsights
from botbuilder.applicationinsights import ApplicationInsightsTelemetryClient, bot_telemetry_processor

from bot import LuisBot
from bot_backend.cards import CardCatalog
from bot_backend.dispatcher import Recognizer, TurnDispatcher
from bot_backend.errors import ConfigurationError, RecognitionError, TransportError
from conectores.bf_msft_comandos import (
    acquire_bf_token, authority_for, diagnose_activity, trust_service_url,
)
from luis_client import LuisRecognizer
from settings import Settings, load_settings, public_env_snapshot

log = logging.getLogger("luis-bot")

ERROR_REPLY = "Sorry, something went wrong processing your message."


def _instrumentation_key(connection_string: str) -> str:
    # "InstrumentationKey=...;IngestionEndpoint=..." o la clave sola
    for part in connection_string.split(";"):
        k, _, v = part.partition("=")
        if k.strip().lower() == "instrumentationkey":
            return v.strip()
    return connection_string.strip()


# ==========================
# Manejo global de errores
# ==========================
async def on_error(context: TurnContext, error: Exception):
    if isinstance(error, (RecognitionError, TransportError)):
        # El turno se aborta sin respuesta parcial
        log.error("[BOT ERROR] turno abortado (%s): %s", type(error).__name__, error)
        return
    log.error("[BOT ERROR] %s", error, exc_info=True)
    try:
        await context.send_activity(ERROR_REPLY)
    except Exception as e:
        log.error("[BOT ERROR][send_activity] %s", e, exc_info=True)


def _use_telemetry(adapter: CloudAdapter, connection_string: str) -> None:
    try:
        ai_client = ApplicationInsightsTelemetryClient(
            _instrumentation_key(connection_string), telemetry_processor=bot_telemetry_processor
        )
        # Loguea actividades entrantes/salientes sin PII
        adapter.use(TelemetryLoggerMiddleware(ai_client, log_personal_information=False))
        log.info("[AI] Application Insights habilitado")
    except Exception as e:
        log.warning("[AI] No se pudo inicializar App Insights: %s", e)


def create_app(
    settings: Settings,
    recognizer: Optional[Recognizer] = None,
    cards: Optional[CardCatalog] = None,
) -> web.Application:
    """Arma la app aiohttp. Las tarjetas y LUIS se validan aquí, antes de aceptar tráfico."""
    cards = cards or CardCatalog.load(settings.cards_dir)

    luis: Optional[LuisRecognizer] = None
    if recognizer is None:
        settings.validate()
        luis = LuisRecognizer(
            app_id=settings.luis_app_id,
            api_key=settings.luis_api_key,
            endpoint=settings.luis_endpoint,
            slot=settings.luis_slot,
            timeout=settings.luis_timeout,
        )
        recognizer = luis

    # ==========================
    # CloudAdapter + Auth
    # ==========================
    auth = ConfigurationBotFrameworkAuthentication(configuration=settings.bot_framework_config())
    adapter = CloudAdapter(auth)
    adapter.on_turn_error = on_error
    if settings.appinsights_connection_string:
        _use_telemetry(adapter, settings.appinsights_connection_string)

    dispatcher = TurnDispatcher(recognizer, cards, reply_text=settings.reply_text)
    bot = LuisBot(dispatcher)

    # ==========
    # Handlers
    # ==========
    async def messages(req: web.Request) -> web.Response:
        if "application/json" not in req.headers.get("Content-Type", ""):
            return web.Response(status=415, text="Content-Type must be application/json")

        try:
            body = await req.json()
        except ValueError:
            return web.Response(status=400, text="Body must be a JSON activity")
        if not isinstance(body, dict):
            return web.Response(status=400, text="Body must be a JSON activity")

        activity: Activity = Activity().deserialize(body)
        auth_header = req.headers.get("Authorization", "")

        log.info("[DIAG] %s", diagnose_activity(activity, settings.app_id))
        trust_service_url(activity.service_url)

        async def aux(turn_context: TurnContext):
            await bot.on_turn(turn_context)

        # Orden CloudAdapter: (auth_header, activity, callback)
        invoke_response = await adapter.process_activity(auth_header, activity, aux)
        if invoke_response:
            return web.json_response(data=invoke_response.body, status=invoke_response.status)
        return web.Response(status=201)

    async def health(_: web.Request) -> web.Response:
        return web.json_response({"ok": True})

    async def diag_env(_: web.Request) -> web.Response:
        return web.json_response(public_env_snapshot())

    # --- Diagnóstico de token MSAL (para validar secreto) ---
    async def diag_msal(_: web.Request) -> web.Response:
        if not settings.app_id or not settings.app_password:
            return web.json_response({"ok": False, "error": "Faltan AppId/Secret"}, status=500)
        try:
            info = acquire_bf_token(
                settings.app_id, settings.app_password,
                authority_for(settings.app_tenant_id, settings.app_type),
            )
        except Exception as e:
            return web.json_response({"ok": False, "exception": str(e)}, status=500)
        ok = bool(info.get("has_access_token"))
        return web.json_response({"ok": ok, **info}, status=200 if ok else 500)

    async def close_luis(_: web.Application) -> None:
        if luis is not None:
            await luis.close()

    # ==========
    # App AIOHTTP
    # ==========
    app = web.Application()
    app.router.add_post("/api/messages", messages)
    app.router.add_get("/health", health)
    app.router.add_get("/diag/env", diag_env)
    app.router.add_get("/diag/msal", diag_msal)
    app.on_cleanup.append(close_luis)
    return app


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    try:
        settings = load_settings()
        app = create_app(settings)
    except ConfigurationError as e:
        log.critical("[CONFIG] %s", e)
        raise SystemExit(1) from e
    web.run_app(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
