# tests/test_load_invites.py
# =================================================================================
# 📄 Validación de la planilla de invitaciones (pandas)
# =================================================================================

import json

import pandas as pd
import pytest

from scripts.load_invites import df_to_records, load_and_validate_invites, split_guest_names

CSV = (
    "Label,max_guests,guests,allow_plus_one\n"
    "Família Silva,2,Ana Silva; João Silva e esposa,sim\n"
    ",1,Beatriz,\n"
    "Sem nomes,0,,\n"
    ",3,,\n"
    "Tios,abc,,\n"
    "família silva,1,,\n"
)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "convites.csv"
    path.write_text(CSV, encoding="utf-8")
    return str(path)


def test_valid_rows_are_normalized(csv_file):
    df, errors = load_and_validate_invites(csv_file, strict=False)

    records = df_to_records(df)
    assert records[0] == {
        "label": "Família Silva",
        "max_guests": 2,
        "allow_plus_one": True,
        "guests": ["Ana Silva", "João Silva e esposa"],
    }
    assert records[1]["label"] is None
    json.dumps(records, allow_nan=False)
    assert records[1]["guests"] == ["Beatriz"]
    assert len(records) == 3


def test_invalid_rows_are_reported_by_line(csv_file):
    _, errors = load_and_validate_invites(csv_file, strict=False)

    assert any(e.startswith("Fila 4:") for e in errors)
    assert any(e.startswith("Fila 5:") for e in errors)
    assert any(e.startswith("Fila 6:") for e in errors)
    assert any("Labels repetidos" in e for e in errors)


def test_strict_mode_raises(csv_file):
    with pytest.raises(ValueError):
        load_and_validate_invites(csv_file, strict=True)


def test_missing_required_column(tmp_path):
    path = tmp_path / "sem_coluna.csv"
    pd.DataFrame({"label": ["A"]}).to_csv(path, index=False)

    with pytest.raises(ValueError, match="max_guests"):
        load_and_validate_invites(str(path))


def test_split_guest_names_removes_blanks_and_duplicates():
    assert split_guest_names(" Ana  Silva ;;ana silva; Rui ") == ["Ana Silva", "Rui"]
