# weddingsite/mailer.py  # Envío de correos de la plataforma.

# =================================================================================
# 📧 MÓDULO DE ENVÍO DE CORREOS (texto + HTML)
# ---------------------------------------------------------------------------------
# Centraliza el envío por SendGrid, Gmail SMTP o Resend (EMAIL_PROVIDER), las
# plantillas i18n (pt/en/es) y los helpers de alto nivel:
# - send_rsvp_notification_email: aviso a la pareja cuando llega un RSVP.
# - send_magic_link_email: enlace de acceso al panel de la pareja.
# Con DRY_RUN=1 (por defecto) solo se registra el envío en los logs.
# =================================================================================

# 🐍 Importaciones
import html
import json
import os
import smtplib
import socket
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from ssl import create_default_context
from typing import Optional

import requests
from loguru import logger
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail

from weddingsite.utils.dates import format_event_date

SUPPORTED_LANGS = ("pt", "en", "es")
RESEND_API_URL = "https://api.resend.com/emails"

# =================================================================================
# ✅ Configuración leída al importar (se revalida en cada envío por si cambia el .env)
# =================================================================================
DRY_RUN = os.getenv("DRY_RUN", "1") == "1"
FROM_EMAIL = os.getenv("EMAIL_FROM", "")
EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "Convite de Casamento")

# Valida configuración crítica solo si NO estamos en modo simulación.
if not DRY_RUN:
    provider_now = os.getenv("EMAIL_PROVIDER", "sendgrid").lower()

    if provider_now == "sendgrid":
        if not os.getenv("SENDGRID_API_KEY"):
            raise RuntimeError("Falta SENDGRID_API_KEY para envíos reales con SendGrid.")
        if not FROM_EMAIL:
            raise RuntimeError("Falta EMAIL_FROM para envíos reales con SendGrid.")

    elif provider_now == "resend":
        if not os.getenv("RESEND_API_KEY"):
            raise RuntimeError("Falta RESEND_API_KEY para envíos reales con Resend.")

    elif provider_now == "gmail":
        if not os.getenv("EMAIL_USER", "") or not os.getenv("EMAIL_PASS", ""):
            raise RuntimeError("Faltan EMAIL_USER o EMAIL_PASS para envíos reales con Gmail.")


def mask_email(email: Optional[str]) -> str:
    """'ana.silva@gmail.com' → 'an***@gmail.com' (para logs, nunca PII completa)."""
    if not email or "@" not in email:
        return "<empty>"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def _is_dry_run() -> bool:
    return os.getenv("DRY_RUN", "1") == "1"


# =================================================================================
# 📢 Webhook de alertas (opcional)
# =================================================================================
def send_alert_webhook(title: str, message: str) -> None:
    """Envía alerta a ALERT_WEBHOOK_URL si está definido; silencioso si no."""
    url = os.getenv("ALERT_WEBHOOK_URL")
    if not url:
        return
    try:
        payload = {"text": f"{title}\n{message}"}
        headers = {"Content-Type": "application/json"}
        requests.post(url, data=json.dumps(payload), headers=headers, timeout=5)
    except Exception as e:
        logger.error("No se pudo notificar alerta por webhook: {}", e)


# =================================================================================
# 📨 Asuntos y plantillas (i18n)
# =================================================================================
SUBJECTS = {
    "rsvp_notification": {
        "pt": "RSVP: {name} - {status}",
        "en": "RSVP: {name} - {status}",
        "es": "RSVP: {name} - {status}",
    },
    "magic_link": {
        "pt": "Seu link de acesso ao painel • {title}",
        "en": "Your dashboard access link • {title}",
        "es": "Tu enlace de acceso al panel • {title}",
    },
}

TEMPLATES = {
    "pt": {
        "status_yes": "Confirmado",
        "status_no": "Recusado",
        "heading": "Nova Confirmação de Presença! 💍",
        "event": "Evento",
        "guest": "Convidado",
        "presence": "Presença",
        "presence_yes": "✅ Sim, estarei presente",
        "presence_no": "❌ Não poderei comparecer",
        "companions": "Acompanhantes",
        "phone": "Telefone",
        "message": "Mensagem",
        "magic": (
            "Olá!\n\n"
            "Use o link abaixo para acessar o painel do casamento {title}:\n"
            "{url}\n\n"
            "O link expira em {minutes} minutos. Se você não pediu este acesso, ignore esta mensagem."
        ),
    },
    "en": {
        "status_yes": "Confirmed",
        "status_no": "Declined",
        "heading": "New RSVP received! 💍",
        "event": "Event",
        "guest": "Guest",
        "presence": "Attendance",
        "presence_yes": "✅ Yes, I will attend",
        "presence_no": "❌ I can't make it",
        "companions": "Guests",
        "phone": "Phone",
        "message": "Message",
        "magic": (
            "Hi!\n\n"
            "Use the link below to open the dashboard for the wedding {title}:\n"
            "{url}\n\n"
            "The link expires in {minutes} minutes. If you did not request it, ignore this message."
        ),
    },
    "es": {
        "status_yes": "Confirmado",
        "status_no": "Rechazado",
        "heading": "¡Nueva confirmación de asistencia! 💍",
        "event": "Evento",
        "guest": "Invitado",
        "presence": "Asistencia",
        "presence_yes": "✅ Sí, asistiré",
        "presence_no": "❌ No podré asistir",
        "companions": "Acompañantes",
        "phone": "Teléfono",
        "message": "Mensaje",
        "magic": (
            "¡Hola!\n\n"
            "Usa el enlace de abajo para entrar al panel de la boda {title}:\n"
            "{url}\n\n"
            "El enlace caduca en {minutes} minutos. Si no lo solicitaste, ignora este mensaje."
        ),
    },
}


def _lang_map(lang: Optional[str]) -> dict:
    return TEMPLATES.get(lang or "pt") or TEMPLATES["pt"]


# =================================================================================
# 🛰️ Transporte: Gmail SMTP (fuerza IPv4; soporta 587 STARTTLS y 465 SMTPS)
# =================================================================================
def _smtp_connect_ipv4(host: str, port: int, timeout: float) -> smtplib.SMTP:
    addrinfo = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
    ipv4_ip = addrinfo[0][4][0]
    if port == 465:
        return smtplib.SMTP_SSL(host=ipv4_ip, port=port, timeout=timeout, context=create_default_context())
    server = smtplib.SMTP(timeout=timeout)
    server.connect(ipv4_ip, port)
    return server


def _send_via_gmail(to_email: str, subject: str, text_body: str, html_body: Optional[str]) -> bool:
    host = os.getenv("EMAIL_HOST", "smtp.gmail.com")
    port = int(os.getenv("EMAIL_PORT", "587"))
    user = os.getenv("EMAIL_USER", "")
    pwd = os.getenv("EMAIL_PASS", "")
    from_addr = os.getenv("EMAIL_FROM", user)

    if not (user and pwd and from_addr):
        logger.error("Gmail SMTP no está configurado (EMAIL_USER/EMAIL_PASS/EMAIL_FROM).")
        return False

    try:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"{EMAIL_SENDER_NAME} <{from_addr}>"
        msg["To"] = (to_email or "").strip()
        msg["Subject"] = subject
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))

        timeout = float(os.getenv("SMTP_TIMEOUT", "30"))
        server = _smtp_connect_ipv4(host, port, timeout)
        if port == 587:
            server.ehlo()
            server.starttls(context=create_default_context())
            server.ehlo()
        server.login(user, pwd)
        server.sendmail(from_addr, [msg["To"]], msg.as_string())
        server.quit()
        logger.info("Gmail SMTP → enviado a {}", mask_email(to_email))
        return True
    except Exception as e:
        logger.exception("Gmail SMTP → excepción enviando a {}: {}", mask_email(to_email), e)
        return False


# =================================================================================
# 🛰️ Transporte: Resend (API HTTP)
# =================================================================================
def _send_via_resend(to_email: str, subject: str, text_body: str, html_body: Optional[str]) -> bool:
    api_key = os.getenv("RESEND_API_KEY", "")
    from_addr = os.getenv("EMAIL_FROM", "") or "onboarding@resend.dev"
    if not api_key:
        logger.error("Config de mailer incompleta (Resend): RESEND_API_KEY ausente.")
        return False

    payload = {
        "from": f"{EMAIL_SENDER_NAME} <{from_addr}>",
        "to": [to_email],
        "subject": subject,
        "text": text_body,
    }
    if html_body:
        payload["html"] = html_body
    try:
        resp = requests.post(
            RESEND_API_URL,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            data=json.dumps(payload),
            timeout=10,
        )
        if 200 <= resp.status_code < 300:
            logger.info("Resend → enviado a {}", mask_email(to_email))
            return True
        logger.error("Resend error -> status={} | body={}", resp.status_code, resp.text[:300])
        send_alert_webhook("🚨 Mailer error (Resend)", f"No se pudo enviar. Código: {resp.status_code}.")
        return False
    except Exception as e:
        logger.exception("Excepción enviando con Resend a {}: {}", mask_email(to_email), e)
        return False


# =================================================================================
# 🛰️ Transporte: SendGrid
# =================================================================================
def _send_via_sendgrid(to_email: str, subject: str, text_body: str, html_body: Optional[str]) -> bool:
    from_now = os.getenv("EMAIL_FROM", "")
    api_key = os.getenv("SENDGRID_API_KEY", "")
    if not from_now or not api_key:
        logger.error("Config de mailer incompleta (SendGrid): EMAIL_FROM o SENDGRID_API_KEY ausentes.")
        send_alert_webhook("🚨 Mailer config (SendGrid)", "Falta EMAIL_FROM o SENDGRID_API_KEY (modo real).")
        return False

    message = Mail(
        from_email=From(from_now, EMAIL_SENDER_NAME),
        to_emails=to_email,
        subject=subject,
        plain_text_content=text_body,
        html_content=html_body,
    )
    try:
        response = SendGridAPIClient(api_key).send(message)
        logger.info(
            "SendGrid response: {} | X-Message-Id: {}",
            response.status_code, response.headers.get("X-Message-Id")
        )
        if 200 <= response.status_code < 300:
            return True
        logger.error("SendGrid error -> status={} | body={}", response.status_code, getattr(response, "body", None))
        send_alert_webhook("🚨 Mailer error (SendGrid)", f"No se pudo enviar. Código: {response.status_code}.")
        return False
    except Exception as e:
        logger.exception("Excepción enviando con SendGrid a {}: {}", mask_email(to_email), e)
        send_alert_webhook("🚨 Mailer exception (SendGrid)", f"Asunto: {subject}. Error: {e}")
        return False


# =================================================================================
# ✉️ Router de proveedor
# =================================================================================
def send_email(to_email: str, subject: str, text_body: str, html_body: Optional[str] = None) -> bool:
    """Envía un correo por el proveedor configurado. Devuelve True si se envió (o simuló)."""
    if not to_email:
        logger.warning("send_email sin destinatario; se omite ({}).", subject)
        return False

    if _is_dry_run():
        logger.info("[DRY_RUN] Simular envío a {} | Asunto: {}", mask_email(to_email), subject)
        return True

    provider = os.getenv("EMAIL_PROVIDER", "sendgrid").lower()
    if provider == "gmail":
        return _send_via_gmail(to_email, subject, text_body, html_body)
    if provider == "resend":
        return _send_via_resend(to_email, subject, text_body, html_body)
    return _send_via_sendgrid(to_email, subject, text_body, html_body)


# =================================================================================
# 🧩 Helpers de alto nivel
# =================================================================================
def build_rsvp_notification(summary: dict, lang: str = "pt") -> tuple[str, str, str]:
    """
    Construye (asunto, texto, html) del aviso de RSVP.
    summary: {event_title, guest_name, attending, guests_count, phone, message}
    """
    t = _lang_map(lang)
    attending = bool(summary.get("attending"))
    name = summary.get("guest_name") or ""
    title = summary.get("event_title") or "Casamento"
    status = t["status_yes"] if attending else t["status_no"]
    subject = SUBJECTS["rsvp_notification"].get(lang, SUBJECTS["rsvp_notification"]["pt"]).format(
        name=name, status=status
    )

    rows = [
        (t["event"], title),
        (t["guest"], name),
        (t["presence"], t["presence_yes"] if attending else t["presence_no"]),
    ]
    if attending:
        rows.append((t["companions"], str(summary.get("guests_count") or 0)))
    if summary.get("phone"):
        rows.append((t["phone"], summary["phone"]))
    if summary.get("message"):
        rows.append((t["message"], summary["message"]))

    text_body = t["heading"] + "\n\n" + "\n".join(f"{k}: {v}" for k, v in rows)
    html_body = f"<h2>{html.escape(t['heading'])}</h2>" + "".join(
        f"<p><strong>{html.escape(k)}:</strong> {html.escape(str(v))}</p>" for k, v in rows
    )
    return subject, text_body, html_body


def send_rsvp_notification_email(to_email: str, summary: dict, lang: str = "pt") -> bool:
    """Avisa a la pareja de una nueva respuesta."""
    subject, text_body, html_body = build_rsvp_notification(summary, lang)
    return send_email(to_email, subject, text_body, html_body)


def send_magic_link_email(to_email: str, magic_url: str, event_title: str, lang: str = "pt",
                          minutes: int = 15, event_date=None) -> bool:
    """Envía el enlace mágico de acceso al panel de la pareja."""
    t = _lang_map(lang)
    title = event_title
    if event_date is not None:
        title = f"{event_title} ({format_event_date(event_date, lang)})"
    subject = SUBJECTS["magic_link"].get(lang, SUBJECTS["magic_link"]["pt"]).format(title=event_title)
    text_body = t["magic"].format(title=title, url=magic_url, minutes=minutes)
    html_body = "<p>" + "<br>".join(html.escape(line) for line in text_body.splitlines()).replace(
        html.escape(magic_url), f'<a href="{html.escape(magic_url)}">{html.escape(magic_url)}</a>'
    ) + "</p>"
    return send_email(to_email, subject, text_body, html_body)
