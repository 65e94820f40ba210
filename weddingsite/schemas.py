# weddingsite/schemas.py  # Esquemas Pydantic de la API.

# =================================================================================
# 📦 Schemas (MODELOS DE DATOS Pydantic)
# ---------------------------------------------------------------------------------
# - Validan la entrada de los endpoints públicos y de administración.
# - Serializan objetos ORM a JSON (from_attributes=True).
# - Pydantic v2: model_validator/field_validator y ConfigDict.
# =================================================================================

import re
from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from weddingsite.models import GuestStatusEnum, GuestTypeEnum

LanguageLiteral = Literal["pt", "en", "es"]
StatusFilterLiteral = Literal["all", "attending", "declined"]

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


# =================================================================================
# 🧰 Utilidades de normalización
# =================================================================================
def _normalize_phone(raw: Optional[str]) -> Optional[str]:
    """Devuelve el teléfono solo con dígitos y '+', o None si queda vacío."""
    if not raw:
        return None
    digits = re.sub(r"[^\d+]", "", raw.strip())
    return digits or None


def _clean_text(raw: Optional[str]) -> Optional[str]:
    """Recorta espacios; cadena vacía → None."""
    if raw is None:
        return None
    raw = str(raw).strip()
    return raw or None


def _clean_names(names: Optional[List[str]]) -> List[str]:
    """Recorta, descarta vacíos y elimina duplicados respetando el orden."""
    seen, out = set(), []
    for n in names or []:
        n = (n or "").strip()
        if n and n.lower() not in seen:
            seen.add(n.lower())
            out.append(n)
    return out


# =================================================================================
# 📝 RSVP (formulario público)
# =================================================================================
class RSVPSubmitRequest(BaseModel):
    """
    Cuerpo del POST /api/rsvp. Todos los campos son opcionales a nivel de esquema:
    la capa crud comprueba los obligatorios y responde con el mensaje localizado.
    guests_count admite cualquier valor; se coacciona en crud (no numérico o ≤0 → 1).
    """
    invite_id: Optional[str] = None
    event_id: Optional[str] = None
    guest_name: Optional[str] = None
    attending: Optional[bool] = None
    guests_count: Optional[Union[int, float, str]] = None
    phone: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=2000)
    lang: Optional[str] = None

    @field_validator("invite_id", "event_id", "guest_name", mode="before")
    @classmethod
    def _strip_ids(cls, v: Any) -> Any:
        # Solo se recortan cadenas; números o listas llegan tal cual y fallan con 422.
        return _clean_text(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def _sanitize_fields(self):
        self.phone = _clean_text(self.phone)
        self.message = _clean_text(self.message)
        return self


class RSVPSubmitResponse(BaseModel):
    success: bool = True
    message: str
    rsvpId: str


class RSVPOut(BaseModel):
    id: str
    invite_id: str
    event_id: str
    guest_name: str
    attending: bool
    guests_count: int
    phone: Optional[str] = None
    message: Optional[str] = None
    table_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =================================================================================
# 💍 Evento / Tema / Quiz
# =================================================================================
class EventOut(BaseModel):
    id: str
    slug: str
    title: str
    groom_name: Optional[str] = None
    bride_name: Optional[str] = None
    groom_parents: Optional[str] = None
    bride_parents: Optional[str] = None
    date: Optional[datetime] = None
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None
    google_maps_url: Optional[str] = None
    contact_phones: Optional[List[str]] = None
    pix_key: Optional[str] = None
    bank_name: Optional[str] = None
    bank_nib: Optional[str] = None
    mobile_money_number: Optional[str] = None
    logo_url: Optional[str] = None
    music_url: Optional[str] = None
    story_json: Optional[Any] = None
    gallery_json: Optional[Any] = None
    gifts_json: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)


class EventAdminOut(EventOut):
    owner_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EventContentUpdate(BaseModel):
    """Campos que la pareja puede editar (PATCH: solo se aplican los enviados)."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    groom_name: Optional[str] = None
    bride_name: Optional[str] = None
    groom_parents: Optional[str] = None
    bride_parents: Optional[str] = None
    date: Optional[datetime] = None
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None
    google_maps_url: Optional[str] = None
    contact_phones: Optional[List[str]] = None
    pix_key: Optional[str] = None
    bank_name: Optional[str] = None
    bank_nib: Optional[str] = None
    mobile_money_number: Optional[str] = None
    logo_url: Optional[str] = None
    music_url: Optional[str] = None
    story_json: Optional[List[dict]] = None
    gallery_json: Optional[List[dict]] = None
    gifts_json: Optional[List[dict]] = None

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, v: Optional[str]) -> str:
        # Omitirlo deja el título como está; null explícito no (columna NOT NULL).
        if v is None or not v.strip():
            raise ValueError("El título no puede quedar vacío.")
        return v.strip()

    @field_validator("contact_phones")
    @classmethod
    def _clean_phones(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [p for p in (_normalize_phone(x) for x in v) if p]


class EventCreate(BaseModel):
    slug: str = Field(..., min_length=2, max_length=80)
    title: str = Field(..., min_length=1, max_length=200)
    owner_email: Optional[EmailStr] = None
    groom_name: Optional[str] = None
    bride_name: Optional[str] = None
    date: Optional[datetime] = None
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def _normalize_slug(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if not SLUG_RE.match(v):
            raise ValueError("El slug solo admite minúsculas, números y guiones.")
        return v


class EventOwnerUpdate(EventContentUpdate):
    owner_email: Optional[EmailStr] = None


class ThemeOut(BaseModel):
    id: str
    template: str
    colors: Optional[dict] = None
    fonts: Optional[dict] = None
    wedding_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ThemeIn(BaseModel):
    template: str = Field(default="classic", min_length=1, max_length=60)
    colors: Optional[dict] = None
    fonts: Optional[dict] = None
    wedding_date: Optional[datetime] = None


class QuizQuestionOut(BaseModel):
    id: str
    question: str
    options: List[str]
    correct_answer: int
    position: int

    model_config = ConfigDict(from_attributes=True)


class QuizQuestionIn(BaseModel):
    question: str = Field(..., min_length=1, max_length=500)
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(default=0, ge=0)
    position: Optional[int] = None

    @model_validator(mode="after")
    def _answer_in_range(self):
        self.options = [o.strip() for o in self.options if o and o.strip()]
        if len(self.options) < 2:
            raise ValueError("La pregunta necesita al menos dos opciones.")
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer fuera de rango.")
        return self


class EventContextOut(BaseModel):
    event: EventOut
    theme: Optional[ThemeOut] = None
    quiz: List[QuizQuestionOut] = Field(default_factory=list)


# =================================================================================
# ✉️ Invitaciones / nombres sugeridos
# =================================================================================
class GuestOut(BaseModel):
    id: str
    name: str
    type: GuestTypeEnum
    status: GuestStatusEnum

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class GuestCandidate(BaseModel):
    """Nombre sugerido en el formulario (con separación de acompañante)."""
    id: str
    name: str
    principal_name: str
    companion_allowed: bool
    invite_id: str


class InviteCreate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=200)
    max_guests: int = Field(default=1, ge=1, le=50)
    allow_plus_one: bool = False
    guests: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _sanitize(self):
        self.label = _clean_text(self.label)
        self.guests = _clean_names(self.guests)
        return self


class InviteUpdate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=200)
    max_guests: Optional[int] = Field(default=None, ge=1, le=50)
    allow_plus_one: Optional[bool] = None
    guests: Optional[List[str]] = None  # None → no se tocan; lista → se sincronizan.

    @model_validator(mode="after")
    def _sanitize(self):
        if self.guests is not None:
            self.guests = _clean_names(self.guests)
        return self


class InviteOut(BaseModel):
    id: str
    event_id: str
    token: str
    label: Optional[str] = None
    max_guests: int
    allow_plus_one: bool
    expires_at: Optional[datetime] = None
    created_at: datetime
    guests: List[GuestOut] = Field(default_factory=list)
    rsvp: Optional[RSVPOut] = None

    model_config = ConfigDict(from_attributes=True)


class PublicInviteOut(BaseModel):
    """Vista del invitado: metadatos de la invitación + nombres + RSVP previo."""
    id: str
    token: str
    label: Optional[str] = None
    max_guests: int
    allow_plus_one: bool
    expires_at: Optional[datetime] = None
    guests: List[GuestCandidate] = Field(default_factory=list)
    rsvp: Optional[RSVPOut] = None


class ShareLinkOut(BaseModel):
    url: str
    whatsapp_text: str
    whatsapp_url: str


class ImportInviteIn(BaseModel):
    label: Optional[str] = None
    max_guests: int = Field(default=1, ge=1, le=50)
    allow_plus_one: bool = False
    guests: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _split_guests(cls, data):
        # Acepta "Ana; Rui" además de una lista.
        if isinstance(data, dict) and isinstance(data.get("guests"), str):
            data = {**data, "guests": data["guests"].split(";")}
        return data

    @model_validator(mode="after")
    def _sanitize(self):
        self.label = _clean_text(self.label)
        self.guests = _clean_names(self.guests)
        if not self.label and not self.guests:
            raise ValueError("Cada invitación necesita label o al menos un nombre.")
        return self


class ImportInvitesPayload(BaseModel):
    items: List[dict]

    @model_validator(mode="before")
    @classmethod
    def _accept_rows_alias(cls, data):
        if isinstance(data, dict):
            if "rows" in data and "items" not in data:
                data = {**data, "items": data["rows"]}
        return data


class ImportInvitesResult(BaseModel):
    created: int
    skipped: int
    errors: List[str] = Field(default_factory=list)
    tokens: List[str] = Field(default_factory=list)


# =================================================================================
# 📊 Estadísticas y mesas
# =================================================================================
class RSVPStats(BaseModel):
    total_invites: int
    total_guests_listed: int
    confirmed_guests: int
    declined: int
    pending_invites: int


class TableIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    capacity: Optional[int] = Field(default=None, ge=1, le=100)


class SeatedRSVP(BaseModel):
    id: str
    guest_name: str
    guests_count: int

    model_config = ConfigDict(from_attributes=True)


class TableOut(BaseModel):
    id: str
    name: str
    capacity: int
    current: int
    available: int
    is_full: bool
    rsvps: List[SeatedRSVP] = Field(default_factory=list)


class TableAssignRequest(BaseModel):
    rsvp_id: str
    table_id: Optional[str] = None  # None → quitar de la mesa.


# =================================================================================
# 💬 Mensajes / ticket / fotos
# =================================================================================
class PublicMessageIn(BaseModel):
    name: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=1000)
    lang: Optional[str] = None

    @model_validator(mode="after")
    def _sanitize(self):
        self.name = _clean_text(self.name)
        self.message = _clean_text(self.message)
        return self


class WallMessage(BaseModel):
    id: str
    name: str
    message: str
    created_at: datetime
    type: Literal["rsvp", "public"]


class TicketOut(BaseModel):
    rsvp_id: str
    guest_name: str
    attending: bool
    guests_count: int
    invite_label: str
    table_name: Optional[str] = None
    event_title: str
    event_slug: str
    event_date: Optional[datetime] = None
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None


class StoredFileOut(BaseModel):
    path: str
    url: str
    created_at: Optional[datetime] = None


# =================================================================================
# 🔐 Magic link (pareja)
# =================================================================================
class RequestAccessPayload(BaseModel):
    slug: str
    email: EmailStr
    lang: Optional[LanguageLiteral] = None

    @field_validator("slug")
    @classmethod
    def _lower_slug(cls, v: str) -> str:
        return (v or "").strip().lower()


class MagicLoginPayload(BaseModel):
    token: str


class CoupleToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    event_id: str
    slug: str


# =================================================================================
# 🛠️ Panel del propietario de la plataforma
# =================================================================================
class OwnerEventSummary(EventAdminOut):
    invites_count: int = 0
    rsvps_count: int = 0
    confirmed_guests: int = 0


class OwnerEventList(BaseModel):
    items: List[OwnerEventSummary]
    total_events: int
    total_rsvps: int
