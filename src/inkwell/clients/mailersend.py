"""
Cliente asíncrono para enviar correos a través de la API de MailerSend.
Se usa para el correo de restablecimiento de contraseña; cualquier fallo se
registra y se devuelve False, nunca se propaga al usuario.
"""

import httpx
from inkwell.core.config import settings, NO_MAILERSEND_KEY
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MAILERSEND_API_URL = "https://api.mailersend.com/v1/email"

RESET_SUBJECT = "Reset your Inkwell password"

RESET_HTML = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
  <h2 style="color: #8B4513;">Reset Your Password</h2>
  <p>Hello,</p>
  <p>You recently requested to reset your password for your Inkwell account.</p>
  <p style="text-align: center; margin: 30px 0;">
    <a href="{link}" style="background-color: #CD7F32; color: #FFF; padding: 12px 24px; text-decoration: none; border-radius: 4px;">Reset Your Password</a>
  </p>
  <p>This link will expire in {minutes} minutes.</p>
  <p>If you did not request a password reset, please ignore this email.</p>
  <p>Best regards,<br>The Inkwell Team</p>
</div>
"""

RESET_TEXT = (
    "You recently requested to reset your password for your Inkwell account.\n"
    "Open this link to choose a new one: {link}\n"
    "This link will expire in {minutes} minutes."
)


def build_reset_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"


async def send_email(to_email: str, subject: str, html: str, text: str,
                     client: Optional[httpx.AsyncClient] = None) -> bool:
    """
    Envía un correo mediante la API de MailerSend.

    Args:
        to_email (str): Dirección del destinatario.
        subject (str): Asunto.
        html (str): Cuerpo HTML.
        text (str): Cuerpo en texto plano.
        client (Optional[httpx.AsyncClient]): Cliente a reutilizar; si no se pasa se crea uno.

    Returns:
        bool: True si MailerSend aceptó el envío, False en cualquier otro caso.
    """
    if settings.MAILERSEND_API_KEY == NO_MAILERSEND_KEY:
        logger.error("MailerSend API Key no está configurada.")
        return False

    payload = {
        "from": {"email": settings.MAILERSEND_FROM_EMAIL, "name": settings.MAILERSEND_FROM_NAME},
        "to": [{"email": to_email, "name": to_email.split("@")[0]}],
        "subject": subject,
        "html": html,
        "text": text,
    }
    headers = {"Authorization": f"Bearer {settings.MAILERSEND_API_KEY}"}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                response = await own_client.post(MAILERSEND_API_URL, json=payload, headers=headers)
        else:
            response = await client.post(MAILERSEND_API_URL, json=payload, headers=headers)
        response.raise_for_status()
        logger.info(f"Correo '{subject}' enviado a {to_email}.")
        return True
    except httpx.RequestError as exc:
        logger.error(f"Error en la petición a MailerSend: {exc}")
        return False
    except httpx.HTTPStatusError as exc:
        logger.error(f"Error HTTP en MailerSend: {exc.response.status_code} - {exc.response.text}")
        return False


async def send_password_reset_email(to_email: str, token: str,
                                    client: Optional[httpx.AsyncClient] = None) -> bool:
    """Envía el enlace de restablecimiento de contraseña."""
    link = build_reset_link(token)
    minutes = settings.RESET_TOKEN_EXPIRE_MINUTES
    return await send_email(
        to_email,
        RESET_SUBJECT,
        RESET_HTML.format(link=link, minutes=minutes),
        RESET_TEXT.format(link=link, minutes=minutes),
        client=client,
    )
