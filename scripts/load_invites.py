# scripts/load_invites.py
# Carga y validación de la planilla de invitaciones (xlsx/csv) con reporte de errores por fila.

from __future__ import annotations

from typing import List, Optional, Tuple

import pandas as pd

# --- Constantes de Configuración ---
REQUIRED_COLUMNS: List[str] = ["max_guests"]
OPTIONAL_COLUMNS: List[str] = ["label", "guests", "allow_plus_one"]
MAX_GUESTS_LIMIT = 50
TRUTHY = {"1", "true", "sim", "si", "sí", "yes", "x"}


# --- Helpers de normalización ---
def split_guest_names(raw: str) -> List[str]:
    """'Ana Silva; Rui Costa' → ['Ana Silva', 'Rui Costa'] (sin vacíos ni duplicados)."""
    seen, out = set(), []
    for name in (raw or "").split(";"):
        name = " ".join(name.split())
        if name and name.lower() not in seen:
            seen.add(name.lower())
            out.append(name)
    return out


def parse_bool(raw: str) -> bool:
    return (raw or "").strip().lower() in TRUTHY


def _read_table(
    file_path: str, *, sheet_name: Optional[str] = None, csv_sep: str = ",", csv_encoding: str = "utf-8"
) -> pd.DataFrame:
    """Lee .xlsx/.xls o .csv con dtype=str y fillna('')."""
    if file_path.lower().endswith((".xlsx", ".xls")):
        return pd.read_excel(file_path, dtype=str, sheet_name=sheet_name or 0).fillna("")
    return pd.read_csv(file_path, dtype=str, sep=csv_sep, encoding=csv_encoding).fillna("")


# --- Función Principal de Validación ---
def load_and_validate_invites(
    file_path: str,
    strict: bool = True,
    *,
    sheet_name: Optional[str] = None,
    csv_sep: str = ",",
    csv_encoding: str = "utf-8",
) -> Tuple[pd.DataFrame, List[str]]:
    """
    Devuelve (df_validado, errores). Las filas inválidas quedan fuera del DataFrame.
    Si strict=True y hay errores, lanza ValueError.
    """
    try:
        df = _read_table(file_path, sheet_name=sheet_name, csv_sep=csv_sep, csv_encoding=csv_encoding)
    except FileNotFoundError:
        raise FileNotFoundError(f"No se encontró el archivo: {file_path}")
    except Exception as e:
        raise ValueError(f"No se pudo leer el archivo '{file_path}': {e}")

    df.columns = df.columns.str.strip().str.lower()
    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise ValueError(f"Faltan columnas obligatorias: {', '.join(missing_cols)}")
    for col in OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    errors: List[str] = []
    rows = []

    for idx, row in df.iterrows():
        row_num = idx + 2  # +1 por el encabezado, +1 porque las planillas empiezan en 1.

        label = " ".join((row.get("label", "") or "").split())
        guests = split_guest_names(row.get("guests", ""))

        try:
            max_guests = int(float((row.get("max_guests", "") or "").strip()))
        except ValueError:
            errors.append(f"Fila {row_num}: max_guests '{row.get('max_guests')}' no es un número.")
            continue
        if not (1 <= max_guests <= MAX_GUESTS_LIMIT):
            errors.append(f"Fila {row_num}: max_guests {max_guests} fuera de rango (1–{MAX_GUESTS_LIMIT}).")
            continue

        if not label and not guests:
            errors.append(f"Fila {row_num}: se necesita 'label' o al menos un nombre en 'guests'.")
            continue

        rows.append({
            "label": label or None,
            "max_guests": max_guests,
            "allow_plus_one": parse_bool(row.get("allow_plus_one", "")),
            "guests": guests,
        })

    clean_df = pd.DataFrame(rows, columns=["label", "max_guests", "allow_plus_one", "guests"])

    # Labels repetidos: el backend omitiría los siguientes, se avisa aquí.
    labelled = clean_df[clean_df["label"].notna()]
    dups = labelled[labelled["label"].str.lower().duplicated(keep=False)]
    if not dups.empty:
        errors.append(f"Labels repetidos (solo se importará el primero): {', '.join(sorted(set(dups['label'])))}")

    if strict and errors:
        raise ValueError("Errores de validación:\n- " + "\n- ".join(errors))

    return clean_df, errors


def df_to_records(df: pd.DataFrame) -> List[dict]:
    """Filas listas para POST /api/admin/events/{event_id}/invites/import."""
    records = []
    for rec in df.to_dict(orient="records"):
        records.append({
            "label": None if pd.isna(rec["label"]) else rec["label"],
            "max_guests": int(rec["max_guests"]),
            "allow_plus_one": bool(rec["allow_plus_one"]),
            "guests": list(rec["guests"]),
        })
    return records


if __name__ == "__main__":
    print("load_invites.py: módulo utilitario. Úsalo desde scripts/import_invites.py")
