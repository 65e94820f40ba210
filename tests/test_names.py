# tests/test_names.py
# =================================================================================
# 🔎 Coincidencia de nombres (normalización, búsqueda, acompañantes)
# =================================================================================

from types import SimpleNamespace

import pytest

from weddingsite.utils.names import (
    normalize_string,
    parse_companion_name,
    search_guests,
    validate_guest,
)

GUESTS = [SimpleNamespace(name=n) for n in ("José Álvares", "Maria da Conceição", "Joana Alves +1")]


@pytest.mark.parametrize("raw, expected", [
    ("  JOSÉ Álvares ", "jose alvares"),
    ("Conceição", "conceicao"),
    ("", ""),
    (None, ""),
])
def test_normalize_string(raw, expected):
    assert normalize_string(raw) == expected


def test_search_is_accent_and_case_insensitive():
    assert [g.name for g in search_guests("alva", GUESTS)] == ["José Álvares"]
    assert [g.name for g in search_guests("CONCEI", GUESTS)] == ["Maria da Conceição"]


def test_search_needs_at_least_three_characters():
    assert search_guests("jo", GUESTS) == []
    assert search_guests("   ", GUESTS) == []
    assert len(search_guests("jo ", GUESTS)) == 0


def test_validate_guest_matches_full_or_principal_name():
    assert validate_guest("jose alvares", GUESTS).name == "José Álvares"
    assert validate_guest("José", GUESTS) is None
    assert validate_guest("joana alves", GUESTS).name == "Joana Alves +1"
    assert validate_guest("", GUESTS) is None


@pytest.mark.parametrize("full, principal, companion", [
    ("João Silva e esposa", "João Silva", True),
    ("Pedro E Marido", "Pedro", True),
    ("Joana Alves +1", "Joana Alves", True),
    ("Maria da Conceição", "Maria da Conceição", False),
    ("", "", False),
])
def test_parse_companion_name(full, principal, companion):
    parsed = parse_companion_name(full)
    assert parsed.principal_name == principal
    assert parsed.companion_allowed is companion
