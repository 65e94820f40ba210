# weddingsite/crud/errors.py
# =================================================================================
# ⚠️ Errores de dominio lanzados por la capa crud
# ---------------------------------------------------------------------------------
# Cada error lleva el código HTTP y la clave i18n del mensaje; los routers los
# traducen a {"error": ...} (público) o HTTPException(detail=...) (admin).
# =================================================================================


class DomainError(Exception):
    status_code = 400
    message_key = "generic.retry"

    def __init__(self, message_key: str | None = None, status_code: int | None = None, **params):
        self.message_key = message_key or self.message_key
        self.status_code = status_code or self.status_code
        self.params = params
        super().__init__(self.message_key)


# --- RSVP ---
class RSVPError(DomainError):
    pass


class MissingField(RSVPError):
    status_code = 400


class InviteNotFound(RSVPError):
    status_code = 404
    message_key = "rsvp.invite_not_found"


class InviteExpired(RSVPError):
    status_code = 410
    message_key = "rsvp.invite_expired"


class GuestLimitExceeded(RSVPError):
    status_code = 400
    message_key = "rsvp.limit_exceeded"


class GuestNotOnInvite(RSVPError):
    status_code = 400
    message_key = "rsvp.name_not_on_invite"


# --- Recursos / conflictos (paneles de administración) ---
class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    status_code = 409
