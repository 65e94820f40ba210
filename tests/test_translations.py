# tests/test_translations.py
# =================================================================================
# 🔍 Paridad de claves i18n de la app de invitados (base: pt)
# =================================================================================

import pytest

from ui.translations import DEFAULT_LANG, TRANSLATIONS, VALID_LANGS, normalize_lang, t


@pytest.mark.parametrize("lang", [lg for lg in VALID_LANGS if lg != DEFAULT_LANG])
def test_every_language_has_the_same_keys(lang):
    base_keys = set(TRANSLATIONS[DEFAULT_LANG])
    lg_keys = set(TRANSLATIONS[lang])

    assert sorted(base_keys - lg_keys) == [], f"faltan en {lang}"
    assert sorted(lg_keys - base_keys) == [], f"sobran en {lang}"


@pytest.mark.parametrize("raw, expected", [("EN", "en"), ("es-AR", "es"), ("ro", "pt"), (None, "pt")])
def test_normalize_lang(raw, expected):
    assert normalize_lang(raw) == expected


def test_t_formats_and_falls_back():
    assert t("form.invite_for", "en", max_guests=2, plural="s") == "Invitation for **2** guests."
    assert t("nav.wall", "fr") == "Mural"
    assert t("no.such.key", "es") == "no.such.key"
