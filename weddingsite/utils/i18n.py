# weddingsite/utils/i18n.py

from __future__ import annotations

import os

# =================================================================================
# 🔤 Resolución de idioma: payload > Accept-Language > heurística email > default
# =================================================================================

SUPPORTED_LANGS = {"pt", "en", "es"}
DEFAULT_LANG = os.getenv("DEFAULT_LANG", "pt").strip().lower() or "pt"


def _base_lang(code: str | None) -> str | None:
    """Normaliza 'pt-BR', 'en-GB', 'es-ES' a 'pt'/'en'/'es'; None si no está soportado."""
    if not code:
        return None
    code = code.strip().lower()
    if not code:
        return None
    primary = code.split(",")[0].split(";")[0].strip()
    primary = primary.split("-")[0]
    return primary if primary in SUPPORTED_LANGS else None


def _from_accept_language(header: str | None) -> str | None:
    """Recorre Accept-Language y devuelve el primer idioma soportado; None si no hay match."""
    if not header:
        return None
    for part in header.split(","):
        cand = _base_lang(part)
        if cand:
            return cand
    return None


def _heuristic_lang_from_email(email: str | None) -> str | None:
    """Infiere 'pt' para dominios .br/.pt/.ao/.mz y 'es' para .es; si no hay certeza, None."""
    if not email:
        return None
    e = email.strip().lower()
    if e.endswith((".br", ".pt", ".ao", ".mz")):
        return "pt"
    if e.endswith(".es"):
        return "es"
    return None


def resolve_lang(
    payload_lang: str | None,
    accept_language_header: str | None = None,
    email: str | None = None,
    default: str = DEFAULT_LANG,
) -> str:
    """Resuelve y devuelve siempre un idioma soportado ('pt'/'en'/'es')."""
    cand = _base_lang(payload_lang)
    if cand:
        return cand

    cand = _from_accept_language(accept_language_header)
    if cand:
        return cand

    cand = _heuristic_lang_from_email(email)
    if cand:
        return cand

    return default if default in SUPPORTED_LANGS else "pt"


# =================================================================================
# 🗣️ Catálogo de mensajes de la API (respuestas {"error": ...} / {"message": ...})
# =================================================================================
MESSAGES: dict[str, dict[str, str]] = {
    "rsvp.missing_invite": {
        "pt": "ID do convite ausente.",
        "en": "Missing invite ID.",
        "es": "Falta el ID de la invitación.",
    },
    "rsvp.missing_name": {
        "pt": "Nome do convidado ausente.",
        "en": "Missing guest name.",
        "es": "Falta el nombre del invitado.",
    },
    "rsvp.missing_attending": {
        "pt": "Status de presença ausente.",
        "en": "Missing attendance status.",
        "es": "Falta el estado de asistencia.",
    },
    "rsvp.invite_not_found": {
        "pt": "Convite inválido ou não encontrado.",
        "en": "Invalid or unknown invite.",
        "es": "Invitación inválida o no encontrada.",
    },
    "rsvp.invite_expired": {
        "pt": "Este convite expirou.",
        "en": "This invite has expired.",
        "es": "Esta invitación ha caducado.",
    },
    "rsvp.limit_exceeded": {
        "pt": "O número de convidados ({count}) excede o permitido ({max}).",
        "en": "The number of guests ({count}) exceeds the allowed limit ({max}).",
        "es": "El número de invitados ({count}) supera el permitido ({max}).",
    },
    "rsvp.name_not_on_invite": {
        "pt": "Nome não encontrado na lista. Por favor, selecione uma das sugestões.",
        "en": "Name not found on the guest list. Please pick one of the suggestions.",
        "es": "Nombre no encontrado en la lista. Por favor, elige una de las sugerencias.",
    },
    "rsvp.success": {
        "pt": "RSVP confirmado com sucesso!",
        "en": "RSVP confirmed successfully!",
        "es": "¡RSVP confirmado con éxito!",
    },
    "event.not_found": {
        "pt": "Evento \"{slug}\" não encontrado.",
        "en": "Event \"{slug}\" not found.",
        "es": "Evento \"{slug}\" no encontrado.",
    },
    "rsvp.not_found": {
        "pt": "Confirmação não encontrada.",
        "en": "RSVP not found.",
        "es": "Confirmación no encontrada.",
    },
    "messages.missing_fields": {
        "pt": "Nome e mensagem são obrigatórios.",
        "en": "Name and message are required.",
        "es": "Nombre y mensaje son obligatorios.",
    },
    "messages.sent": {
        "pt": "Mensagem enviada!",
        "en": "Message sent!",
        "es": "¡Mensaje enviado!",
    },
    "upload.invalid_type": {
        "pt": "Formato de arquivo não suportado.",
        "en": "Unsupported file type.",
        "es": "Formato de archivo no soportado.",
    },
    "upload.too_large": {
        "pt": "Arquivo muito grande (máximo {mb} MB).",
        "en": "File too large (max {mb} MB).",
        "es": "Archivo demasiado grande (máximo {mb} MB).",
    },
    "rate.limited": {
        "pt": "Muitas tentativas. Tente novamente em alguns minutos.",
        "en": "Too many attempts. Please try again in a few minutes.",
        "es": "Demasiados intentos. Inténtalo de nuevo en unos minutos.",
    },
    "generic.retry": {
        "pt": "Erro ao processar o pedido. Tente novamente.",
        "en": "Error processing the request. Please try again.",
        "es": "Error al procesar la solicitud. Inténtalo de nuevo.",
    },
    "auth.request_access.neutral": {
        "pt": "Se o e-mail estiver associado a este casamento, você receberá um link de acesso.",
        "en": "If the email belongs to this wedding, you will receive an access link.",
        "es": "Si el correo está asociado a esta boda, recibirás un enlace de acceso.",
    },
    "event.slug_taken": {
        "pt": "Já existe um evento com o slug \"{slug}\".",
        "en": "An event with slug \"{slug}\" already exists.",
        "es": "Ya existe un evento con el slug \"{slug}\".",
    },
    "invite.not_found": {
        "pt": "Convite não encontrado.",
        "en": "Invite not found.",
        "es": "Invitación no encontrada.",
    },
    "quiz.not_found": {
        "pt": "Pergunta não encontrada.",
        "en": "Question not found.",
        "es": "Pregunta no encontrada.",
    },
    "message.not_found": {
        "pt": "Mensagem não encontrada.",
        "en": "Message not found.",
        "es": "Mensaje no encontrado.",
    },
    "ticket.not_found": {
        "pt": "Imagem de ticket não encontrada.",
        "en": "Ticket image not found.",
        "es": "Imagen de ticket no encontrada.",
    },
    "table.not_found": {
        "pt": "Mesa não encontrada.",
        "en": "Table not found.",
        "es": "Mesa no encontrada.",
    },
    "table.not_attending": {
        "pt": "Só convidados confirmados podem ser sentados.",
        "en": "Only attending guests can be seated.",
        "es": "Solo los invitados que asisten pueden sentarse.",
    },
    "table.already_there": {
        "pt": "O convidado já está nesta mesa.",
        "en": "The guest is already at this table.",
        "es": "El invitado ya está en esta mesa.",
    },
    "table.full": {
        "pt": "Mesa cheia! Capacidade: {capacity}, Disponível: {available}, Necessário: {needed}",
        "en": "Table full! Capacity: {capacity}, Available: {available}, Needed: {needed}",
        "es": "¡Mesa llena! Capacidad: {capacity}, Disponible: {available}, Necesario: {needed}",
    },
    "auth.invalid_token": {
        "pt": "Link inválido ou expirado.",
        "en": "Invalid or expired link.",
        "es": "Enlace inválido o caducado.",
    },
}


def translate(key: str, lang: str, **params) -> str:
    """Devuelve el mensaje localizado; cae a 'pt' y, en último caso, a la propia clave."""
    entry = MESSAGES.get(key)
    if not entry:
        return key
    template = entry.get(lang) or entry.get("pt") or key
    return template.format(**params) if params else template
