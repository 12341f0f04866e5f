# conectores/bf_msft_comandos.py — Diagnósticos del conector Bot Framework / Entra ID
import logging
from typing import Any, Dict, Optional

import msal
from botframework.connector.auth import MicrosoftAppCredentials

logger = logging.getLogger("luis-bot.bf_msft")

SCOPE = ["https://api.botframework.com/.default"]
AUTHORITY_BASE = "https://login.microsoftonline.com"


def authority_for(tenant: Optional[str], app_type: str = "SingleTenant") -> str:
    if app_type == "SingleTenant" and tenant:
        return f"{AUTHORITY_BASE}/{tenant}"
    return f"{AUTHORITY_BASE}/botframework.com"


def acquire_bf_token(app_id: str, app_secret: str, authority: str) -> Dict[str, Any]:
    """Obtiene un token para Bot Framework con MSAL (client credentials).

    Nunca devuelve el token: solo si se obtuvo y los campos de error de Entra.
    """
    logger.info("bf_msft: solicitando token con authority=%s", authority)
    cca = msal.ConfidentialClientApplication(client_id=app_id, client_credential=app_secret, authority=authority)
    res = cca.acquire_token_for_client(scopes=SCOPE)
    out: Dict[str, Any] = {k: v for k, v in res.items() if k != "access_token"}
    out["has_access_token"] = "access_token" in res
    out["authority"] = authority
    return out


def trust_service_url(url: Optional[str]) -> None:
    """Registra el serviceUrl del canal como confiable para las respuestas salientes."""
    if not url:
        return
    try:
        MicrosoftAppCredentials.trust_service_url(url)
        logger.debug("bf_msft: trusted serviceUrl=%s", url)
    except Exception as e:
        logger.warning("bf_msft: trust_service_url error: %s", e)


def diagnose_activity(activity, app_id: Optional[str]) -> Dict[str, Any]:
    ch = getattr(activity, "channel_id", None)
    su = getattr(activity, "service_url", None)
    recipient = getattr(getattr(activity, "recipient", None), "id", None) or ""

    normalized = recipient
    if ch == "msteams" and recipient.startswith("28:"):
        normalized = recipient.split("28:")[-1]

    return {
        "channelId": ch,
        "serviceUrl": su,
        "type": getattr(activity, "type", None),
        "recipientId": recipient,
        "recipientNormalized": normalized,
        "recipient_matches_app_id": bool(app_id) and normalized == app_id,
    }
