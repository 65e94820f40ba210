# weddingsite/utils/names.py
# =================================================================================
# 🔎 Coincidencia de nombres de invitados (autocompletado del formulario RSVP)
# ---------------------------------------------------------------------------------
# Trabaja sobre cualquier iterable de objetos con atributo `.name` (filas Guest).
# =================================================================================

from __future__ import annotations

import unicodedata
from typing import Iterable, NamedTuple, Optional, TypeVar

MIN_SEARCH_CHARS = 3  # Por debajo de esto no se sugiere nada.

# Sufijos que indican que el nombre incluye acompañante ("Fulano e esposa").
COMPANION_SUFFIXES = (" e esposa", " e esposo", " e mulher", " e marido", " +1")

T = TypeVar("T")


class CompanionName(NamedTuple):
    principal_name: str
    companion_allowed: bool


def normalize_string(value: Optional[str]) -> str:
    """Minúsculas, sin acentos (NFD sin marcas combinantes) y sin espacios en los extremos."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


def search_guests(term: Optional[str], guests: Iterable[T]) -> list[T]:
    """Invitados cuyo nombre normalizado contiene el término; [] si el término es corto."""
    if not term or len(term.strip()) < MIN_SEARCH_CHARS:
        return []
    needle = normalize_string(term)
    return [g for g in guests if needle in normalize_string(getattr(g, "name", ""))]


def validate_guest(name: Optional[str], guests: Iterable[T]) -> Optional[T]:
    """
    Primer invitado cuyo nombre normalizado coincide exactamente; None si no hay.
    También vale el nombre principal sin sufijo de acompañante ('João Silva' para
    'João Silva e esposa'), que es lo que el formulario ofrece en el selector.
    """
    target = normalize_string(name)
    if not target:
        return None
    for g in guests:
        full = getattr(g, "name", "")
        if target in (normalize_string(full), normalize_string(parse_companion_name(full).principal_name)):
            return g
    return None


def parse_companion_name(full_name: Optional[str]) -> CompanionName:
    """Separa 'Fulano e esposa' → ('Fulano', True); sin sufijo → (nombre, False)."""
    if not full_name:
        return CompanionName("", False)
    lower = full_name.lower()
    for suffix in COMPANION_SUFFIXES:
        if lower.endswith(suffix):
            cut = lower.rfind(suffix)
            return CompanionName(full_name[:cut].strip(), True)
    return CompanionName(full_name, False)
