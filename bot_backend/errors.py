# bot_backend/errors.py — Taxonomía de errores del bot


class BotError(Exception):
    """Base de los errores propios del bot."""


class ConfigurationError(BotError):
    """Configuración inválida (LUIS sin registrar, tarjeta ausente o mal formada).

    Es fatal al arrancar: el servidor no acepta turnos.
    """


class RecognitionError(BotError):
    """Falló la llamada a LUIS (timeout, HTTP >= 400, respuesta mal formada).

    Aborta el turno actual sin enviar respuesta.
    """


class TransportError(BotError):
    """No se pudo entregar una respuesta al canal. No se reintenta aquí."""
