# ui/translations.py
# Textos de la app de invitados (pt/en/es). Los mensajes de error de la API ya
# llegan traducidos; aquí solo vive el copy de la interfaz.
from typing import Dict, List, Optional

DEFAULT_LANG: str = "pt"
VALID_LANGS: List[str] = ["pt", "en", "es"]

LANG_DISPLAY: Dict[str, str] = {
    "pt": "Português (PT)",
    "en": "English (EN)",
    "es": "Español (ES)",
}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    # ==================================================
    # Português: idioma por defecto de la plataforma
    # ==================================================
    "pt": {
        # --- Menú ---
        "nav.rsvp": "Confirmar presença",
        "nav.ticket": "Meu bilhete",
        "nav.wall": "Mural",
        "nav.photos": "Fotos",

        # --- Común ---
        "common.missing_event": "Link incompleto. Abra o convite que recebeu dos noivos.",
        "common.net_err": "Não foi possível contactar o servidor. Tente novamente.",
        "common.loading": "A carregar…",
        "common.back": "Voltar",

        # --- Formulario RSVP ---
        "form.title": "💍 Confirme a sua presença",
        "form.hi": "Olá",
        "form.invite_for": "Convite para **{max_guests}** pessoa{plural}.",
        "form.previous": "Já respondeu a este convite. Pode atualizar a sua resposta abaixo.",
        "form.name": "O seu nome",
        "form.name_search": "Procure o seu nome na lista",
        "form.name_search_hint": "Escreva pelo menos 3 letras.",
        "form.no_matches": "Nenhum nome encontrado.",
        "form.attending": "Vai comparecer?",
        "form.yes": "Sim, vou!",
        "form.no": "Infelizmente não",
        "form.guests_count": "Número de pessoas (incluindo você)",
        "form.phone": "Telefone (opcional)",
        "form.message": "Mensagem para os noivos (opcional)",
        "form.submit": "Enviar resposta",
        "form.sending": "A enviar…",
        "form.token_missing": "Código do convite em falta. Use o link que recebeu.",
        "form.generic_error": "Ocorreu um erro ao guardar a sua resposta. Tente mais tarde.",

        # --- Ticket ---
        "ticket.title": "🎟️ O seu bilhete",
        "ticket.empty": "Ainda não há bilhete. Confirme primeiro a sua presença.",
        "ticket.guest": "Convidado",
        "ticket.people": "Pessoas",
        "ticket.table": "Mesa",
        "ticket.declined": "Obrigado por nos avisar. Vamos sentir a sua falta! 😔",
        "ticket.when": "Quando",
        "ticket.where": "Onde",

        # --- Mural ---
        "wall.title": "💌 Mural de mensagens",
        "wall.empty": "Ainda não há mensagens. Seja o primeiro!",
        "wall.name": "O seu nome",
        "wall.message": "A sua mensagem",
        "wall.submit": "Publicar",
        "wall.success": "Mensagem publicada. Obrigado!",

        # --- Fotos ---
        "photos.title": "📸 Fotos do casamento",
        "photos.upload": "Partilhe uma foto",
        "photos.submit": "Enviar foto",
        "photos.success": "Foto enviada!",
        "photos.empty": "Ainda não há fotos.",
    },

    # ==================================================
    # English
    # ==================================================
    "en": {
        "nav.rsvp": "RSVP",
        "nav.ticket": "My ticket",
        "nav.wall": "Guestbook",
        "nav.photos": "Photos",

        "common.missing_event": "Incomplete link. Please open the invitation you received from the couple.",
        "common.net_err": "We couldn't reach the server. Please try again.",
        "common.loading": "Loading…",
        "common.back": "Back",

        "form.title": "💍 Confirm your attendance",
        "form.hi": "Hi",
        "form.invite_for": "Invitation for **{max_guests}** guest{plural}.",
        "form.previous": "You already answered this invitation. You can update your answer below.",
        "form.name": "Your name",
        "form.name_search": "Find your name on the list",
        "form.name_search_hint": "Type at least 3 letters.",
        "form.no_matches": "No names found.",
        "form.attending": "Will you attend?",
        "form.yes": "Yes, I'll be there!",
        "form.no": "Sadly, no",
        "form.guests_count": "Number of people (including you)",
        "form.phone": "Phone (optional)",
        "form.message": "Message for the couple (optional)",
        "form.submit": "Send answer",
        "form.sending": "Sending…",
        "form.token_missing": "Invitation code missing. Please use the link you received.",
        "form.generic_error": "Something went wrong while saving your answer. Please try later.",

        "ticket.title": "🎟️ Your ticket",
        "ticket.empty": "No ticket yet. Please RSVP first.",
        "ticket.guest": "Guest",
        "ticket.people": "People",
        "ticket.table": "Table",
        "ticket.declined": "Thanks for letting us know. We'll miss you! 😔",
        "ticket.when": "When",
        "ticket.where": "Where",

        "wall.title": "💌 Guestbook",
        "wall.empty": "No messages yet. Be the first!",
        "wall.name": "Your name",
        "wall.message": "Your message",
        "wall.submit": "Post",
        "wall.success": "Message posted. Thank you!",

        "photos.title": "📸 Wedding photos",
        "photos.upload": "Share a photo",
        "photos.submit": "Upload photo",
        "photos.success": "Photo uploaded!",
        "photos.empty": "No photos yet.",
    },

    # ==================================================
    # Español
    # ==================================================
    "es": {
        "nav.rsvp": "Confirmar asistencia",
        "nav.ticket": "Mi entrada",
        "nav.wall": "Muro",
        "nav.photos": "Fotos",

        "common.missing_event": "Enlace incompleto. Abre la invitación que recibiste de los novios.",
        "common.net_err": "No pudimos contactar el servidor. Inténtalo de nuevo.",
        "common.loading": "Cargando…",
        "common.back": "Volver",

        "form.title": "💍 Confirma tu asistencia",
        "form.hi": "Hola",
        "form.invite_for": "Invitación para **{max_guests}** persona{plural}.",
        "form.previous": "Ya respondiste esta invitación. Puedes actualizar tu respuesta abajo.",
        "form.name": "Tu nombre",
        "form.name_search": "Busca tu nombre en la lista",
        "form.name_search_hint": "Escribe al menos 3 letras.",
        "form.no_matches": "No se encontraron nombres.",
        "form.attending": "¿Asistirás?",
        "form.yes": "¡Sí, allí estaré!",
        "form.no": "Lamentablemente no",
        "form.guests_count": "Número de personas (incluyéndote)",
        "form.phone": "Teléfono (opcional)",
        "form.message": "Mensaje para los novios (opcional)",
        "form.submit": "Enviar respuesta",
        "form.sending": "Enviando…",
        "form.token_missing": "Falta el código de la invitación. Usa el enlace que recibiste.",
        "form.generic_error": "Ocurrió un error al guardar tu respuesta. Inténtalo más tarde.",

        "ticket.title": "🎟️ Tu entrada",
        "ticket.empty": "Aún no hay entrada. Confirma primero tu asistencia.",
        "ticket.guest": "Invitado",
        "ticket.people": "Personas",
        "ticket.table": "Mesa",
        "ticket.declined": "Gracias por avisarnos. ¡Te echaremos de menos! 😔",
        "ticket.when": "Cuándo",
        "ticket.where": "Dónde",

        "wall.title": "💌 Muro de mensajes",
        "wall.empty": "Aún no hay mensajes. ¡Sé el primero!",
        "wall.name": "Tu nombre",
        "wall.message": "Tu mensaje",
        "wall.submit": "Publicar",
        "wall.success": "Mensaje publicado. ¡Gracias!",

        "photos.title": "📸 Fotos de la boda",
        "photos.upload": "Comparte una foto",
        "photos.submit": "Subir foto",
        "photos.success": "¡Foto subida!",
        "photos.empty": "Aún no hay fotos.",
    },
}


def normalize_lang(code: Optional[str]) -> str:
    """'pt-BR' → 'pt'; cualquier idioma no soportado cae en DEFAULT_LANG."""
    c = (code or "").strip().lower()[:2]
    return c if c in VALID_LANGS else DEFAULT_LANG


def t(key: str, lang: str = DEFAULT_LANG, **params) -> str:
    """Devuelve el texto traducido; si falta, intenta portugués y luego la propia clave."""
    lang = normalize_lang(lang)
    text = TRANSLATIONS.get(lang, {}).get(key) or TRANSLATIONS[DEFAULT_LANG].get(key) or key
    return text.format(**params) if params else text
