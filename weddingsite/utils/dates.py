# weddingsite/utils/dates.py
# =================================================================================
# 🗓️ Utilidades de fecha (UTC naive + formato legible por idioma)
# =================================================================================

from datetime import datetime, timezone
from typing import Optional

_MONTHS_PT = ["janeiro","fevereiro","março","abril","maio","junho","julho","agosto","setembro","outubro","novembro","dezembro"]
_MONTHS_ES = ["enero","febrero","marzo","abril","mayo","junio","julio","agosto","septiembre","octubre","noviembre","diciembre"]
_MONTHS_EN = ["January","February","March","April","May","June","July","August","September","October","November","December"]


def utcnow() -> datetime:
    """Instante actual en UTC sin tzinfo (así se guardan todas las columnas DateTime)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convierte un datetime con zona a UTC naive; los naive se asumen ya en UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_event_date(value: Optional[datetime], lang_code: str) -> str:
    """Devuelve la fecha del evento en texto legible según idioma ('' si no hay fecha)."""
    if value is None:
        return ""
    m = value.month - 1
    if lang_code == "pt":
        return f"{value.day} de {_MONTHS_PT[m]} de {value.year}"
    if lang_code == "es":
        return f"{value.day} de {_MONTHS_ES[m]} de {value.year}"
    return f"{_MONTHS_EN[m]} {value.day}, {value.year}"
