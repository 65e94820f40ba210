# weddingsite/models.py  # Modelos ORM de la plataforma multi-tenant.

# =================================================================================
# 🏛️ DEFINICIÓN DE LOS MODELOS DE LA BASE DE DATOS (ORM)
# ---------------------------------------------------------------------------------
# Cada boda es un tenant (Event) identificado por su slug. Todo lo demás cuelga de él:
# - ThemeConfig: plantilla visual y colores/fuentes (se usa la más reciente).
# - Invite: token compartible con cupo máximo (max_guests) y fecha de expiración.
# - Guest: nombres sugeridos de cada invitación (autocompletado del RSVP).
# - RSVP: como mucho UNA respuesta por invitación (UNIQUE en invite_id).
# - SeatingTable: mesa con capacidad fija; la ocupación se calcula, no se guarda.
# - QuizQuestion / PublicMessage: contenido auxiliar.
# =================================================================================

import enum
import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Enum as SQLAlchemyEnum,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from weddingsite.db import Base
from weddingsite.utils.dates import utcnow

TABLE_DEFAULT_CAPACITY = 10  # Capacidad estándar de cada mesa.

DEFAULT_THEME_COLORS = {"primary": "#D4AF37", "secondary": "#F9F7F4", "text": "#333333"}
DEFAULT_THEME_FONTS = {"heading": "'Outfit', sans-serif", "body": "'Outfit', sans-serif"}


def _uuid() -> str:
    return str(uuid.uuid4())


# 🗂️ ENUMS PARA CONSISTENCIA DE DATOS
# ---------------------------------------------------------------------------------
class GuestTypeEnum(str, enum.Enum):
    principal = "principal"
    companion = "companion"


class GuestStatusEnum(str, enum.Enum):
    pending = "pending"
    responded = "responded"  # Se marca al llegar el RSVP de su invitación.


# 💍 EVENTO (TENANT)
# ---------------------------------------------------------------------------------
class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(80), unique=True, index=True, nullable=False)
    title = Column(String(200), nullable=False)
    owner_email = Column(String(254), nullable=True)

    # --- Pareja y familias ---
    groom_name = Column(String(120), nullable=True)
    bride_name = Column(String(120), nullable=True)
    groom_parents = Column(String(250), nullable=True)
    bride_parents = Column(String(250), nullable=True)

    # --- Fecha, lugar y contacto ---
    date = Column(DateTime, nullable=True)
    venue_name = Column(String(200), nullable=True)
    venue_address = Column(String(300), nullable=True)
    google_maps_url = Column(String(500), nullable=True)
    contact_phones = Column(JSON, nullable=True)

    # --- Datos para regalos en dinero ---
    pix_key = Column(String(120), nullable=True)
    bank_name = Column(String(120), nullable=True)
    bank_nib = Column(String(60), nullable=True)
    mobile_money_number = Column(String(40), nullable=True)

    # --- Medios y bloques de contenido libres (JSON) ---
    logo_url = Column(String(500), nullable=True)
    music_url = Column(String(500), nullable=True)
    story_json = Column(JSON, nullable=True)    # Hitos: {year, title, description, image}
    gallery_json = Column(JSON, nullable=True)  # Fotos: {src, alt, span}
    gifts_json = Column(JSON, nullable=True)    # Categorías de regalos.

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    themes = relationship("ThemeConfig", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)
    invites = relationship("Invite", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)
    tables = relationship("SeatingTable", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)
    quiz_questions = relationship("QuizQuestion", cascade="all, delete-orphan", passive_deletes=True)
    public_messages = relationship("PublicMessage", cascade="all, delete-orphan", passive_deletes=True)
    rsvps = relationship("RSVP", cascade="all, delete-orphan", passive_deletes=True)


# 🎨 TEMA VISUAL
# ---------------------------------------------------------------------------------
class ThemeConfig(Base):
    __tablename__ = "theme_configs"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    template = Column(String(60), default="classic", nullable=False)
    colors = Column(JSON, nullable=True)
    fonts = Column(JSON, nullable=True)
    wedding_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="themes")


# ✉️ INVITACIONES
# ---------------------------------------------------------------------------------
class Invite(Base):
    __tablename__ = "invites"
    __table_args__ = (
        CheckConstraint("max_guests >= 1", name="ck_invites_max_guests_positive"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    token = Column(String(16), unique=True, index=True, nullable=False)
    label = Column(String(200), nullable=True)
    max_guests = Column(Integer, default=1, nullable=False)
    allow_plus_one = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="invites")
    guests = relationship(
        "Guest",
        back_populates="invite",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="Guest.created_at",
    )
    rsvp = relationship(
        "RSVP",
        back_populates="invite",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# 🧑 NOMBRES SUGERIDOS (LISTA DE INVITADOS)
# ---------------------------------------------------------------------------------
class Guest(Base):
    __tablename__ = "guests"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    invite_id = Column(String(36), ForeignKey("invites.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(200), nullable=False)
    type = Column(SQLAlchemyEnum(GuestTypeEnum), default=GuestTypeEnum.principal, nullable=False)
    status = Column(SQLAlchemyEnum(GuestStatusEnum), default=GuestStatusEnum.pending, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    invite = relationship("Invite", back_populates="guests")


# 📝 RESPUESTAS (RSVP)
# ---------------------------------------------------------------------------------
class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (
        UniqueConstraint("invite_id", name="uq_rsvps_invite_id"),  # Una invitación → como mucho un RSVP.
        CheckConstraint("guests_count >= 0", name="ck_rsvps_guests_count_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    invite_id = Column(String(36), ForeignKey("invites.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    guest_name = Column(String(200), nullable=False)
    attending = Column(Boolean, nullable=False)
    guests_count = Column(Integer, default=0, nullable=False)
    phone = Column(String(32), nullable=True)
    message = Column(Text, nullable=True)
    table_id = Column(String(36), ForeignKey("tables.id", ondelete="SET NULL"), index=True, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    invite = relationship("Invite", back_populates="rsvp")
    table = relationship("SeatingTable", back_populates="rsvps")


# 🪑 MESAS
# ---------------------------------------------------------------------------------
class SeatingTable(Base):
    __tablename__ = "tables"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(120), nullable=False)
    capacity = Column(Integer, default=TABLE_DEFAULT_CAPACITY, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="tables")
    rsvps = relationship("RSVP", back_populates="table", passive_deletes=True)

    @property
    def occupancy(self) -> int:
        """Suma de guests_count de los RSVP que asisten sentados en esta mesa (derivada, no se guarda)."""
        return sum(r.guests_count or 0 for r in self.rsvps if r.attending)


# ❓ QUIZ
# ---------------------------------------------------------------------------------
class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    question = Column(String(500), nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer = Column(Integer, default=0, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


# 💬 MURAL DE MENSAJES
# ---------------------------------------------------------------------------------
class PublicMessage(Base):
    __tablename__ = "public_messages"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
