# tests/test_i18n.py
# =================================================================================
# 🌍 Resolución de idioma y catálogo de mensajes
# =================================================================================

import pytest

from weddingsite.utils.dates import format_event_date
from weddingsite.utils.i18n import MESSAGES, SUPPORTED_LANGS, resolve_lang, translate


@pytest.mark.parametrize("payload, header, email, expected", [
    ("es", "en-US", "a@b.com.br", "es"),
    (None, "en-GB,en;q=0.9", "a@b.com.br", "en"),
    (None, "fr-FR, es;q=0.8", None, "es"),
    (None, None, "a@b.com.br", "pt"),
    (None, None, "a@b.es", "es"),
    ("de", "fr", "a@b.com", "pt"),
    ("PT-br", None, None, "pt"),
])
def test_resolve_lang_priority(payload, header, email, expected):
    assert resolve_lang(payload, header, email=email) == expected


def test_translate_formats_params():
    assert translate("rsvp.limit_exceeded", "en", count=4, max=2) == \
        "The number of guests (4) exceeds the allowed limit (2)."


def test_translate_falls_back_to_portuguese_then_key():
    assert translate("rsvp.invite_expired", "fr") == "Este convite expirou."
    assert translate("no.such.key", "en") == "no.such.key"


def test_every_message_has_all_languages():
    for key, entry in MESSAGES.items():
        assert set(entry) == SUPPORTED_LANGS, key


def test_format_event_date_by_language():
    from datetime import datetime

    value = datetime(2026, 3, 14, 16, 0)
    assert format_event_date(value, "pt") == "14 de março de 2026"
    assert format_event_date(value, "es") == "14 de marzo de 2026"
    assert format_event_date(value, "en") == "March 14, 2026"
    assert format_event_date(None, "pt") == ""
