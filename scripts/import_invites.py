# scripts/import_invites.py
# =============================================================================
# 🚚 Importador masivo de invitaciones hacia el backend (panel de la pareja).
# - Valida/normaliza el archivo (xlsx/csv) con load_and_validate_invites().
# - Envía en lotes a:
#     POST /api/admin/events/{event_id}/invites/import
# - Autenticación: ADMIN_API_KEY (cabecera x-admin-key) o COUPLE_TOKEN (Bearer).
# =============================================================================

import argparse
import json
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

SCRIPTS_DIR = Path(__file__).resolve().parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from load_invites import df_to_records, load_and_validate_invites  # noqa: E402

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")
COUPLE_TOKEN = os.getenv("COUPLE_TOKEN", "")


def _endpoint(event_id: str) -> str:
    return f"{API_BASE_URL.rstrip('/')}/api/admin/events/{event_id}/invites/import"


def _headers() -> dict:
    headers = {"Content-Type": "application/json"}
    if ADMIN_API_KEY:
        headers["x-admin-key"] = ADMIN_API_KEY
    elif COUPLE_TOKEN:
        headers["Authorization"] = f"Bearer {COUPLE_TOKEN}"
    return headers


def _post_batch(event_id: str, records: list[dict], timeout: int = 60) -> dict:
    """Envía un lote y devuelve el JSON de respuesta (o lanza con el detalle del error)."""
    resp = requests.post(_endpoint(event_id), headers=_headers(), data=json.dumps({"items": records}), timeout=timeout)
    if resp.status_code != 200:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        raise RuntimeError(f"HTTP {resp.status_code} - {detail}")
    return resp.json()


def main():
    parser = argparse.ArgumentParser(description="Importador masivo de invitaciones.")
    parser.add_argument("event_id", help="ID del evento destino")
    parser.add_argument("file", help="Ruta al archivo .xlsx/.xls o .csv")
    parser.add_argument("--sheet", default=None, help="Nombre de hoja en Excel (opcional)")
    parser.add_argument("--sep", default=",", help="Separador para CSV (por defecto ',')")
    parser.add_argument("--encoding", default="utf-8", help="Encoding para CSV (por defecto utf-8)")
    parser.add_argument("--batch", type=int, default=200, help="Tamaño de lote (por defecto 200)")
    parser.add_argument("--strict", action="store_true", help="Falla si hay cualquier error de validación")
    parser.add_argument("--dry-run", action="store_true", help="Solo valida y muestra vista previa; no importa")
    args = parser.parse_args()

    print(f"📥 Cargando archivo: {args.file}")
    try:
        df, errors = load_and_validate_invites(
            args.file,
            strict=args.strict,
            sheet_name=args.sheet,
            csv_sep=args.sep,
            csv_encoding=args.encoding,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error al validar: {e}")
        sys.exit(1)

    if errors:
        print("⚠️  Advertencias/errores detectados en validación:")
        print(" - " + "\n - ".join(errors))

    if df.empty:
        print("⛔ No hay invitaciones para importar.")
        sys.exit(1)

    records = df_to_records(df)
    print(f"📦 Invitaciones preparadas: {len(records)}")

    if args.dry_run:
        print("🧪 DRY-RUN activo: no se enviará nada al backend.")
        print(json.dumps(records[:3], indent=2, ensure_ascii=False))
        sys.exit(0)

    if not ADMIN_API_KEY and not COUPLE_TOKEN:
        print("❌ Define ADMIN_API_KEY o COUPLE_TOKEN en el entorno.")
        sys.exit(1)

    batch_size = max(1, args.batch)
    total = len(records)
    created = skipped = 0
    tokens: list[str] = []
    all_errors: list[str] = []

    print(f"➡️  Importando en lotes de {batch_size} hacia {_endpoint(args.event_id)}")
    for i in range(0, total, batch_size):
        chunk = records[i:i + batch_size]
        n = i // batch_size + 1
        try:
            result = _post_batch(args.event_id, chunk)
        except (requests.RequestException, RuntimeError) as e:
            msg = f"Lote {n} (filas {i + 1}-{min(i + batch_size, total)}): {e}"
            print(f"   ✗ {msg}")
            all_errors.append(msg)
            skipped += len(chunk)
            continue
        created += int(result.get("created", 0))
        skipped += int(result.get("skipped", 0))
        tokens.extend(result.get("tokens", []) or [])
        all_errors.extend(result.get("errors", []) or [])
        print(f"   ✓ Lote {n}: +{result.get('created', 0)} creadas, +{result.get('skipped', 0)} omitidas")

    print("\n✅ Resumen de importación:")
    print(json.dumps(
        {"created": created, "skipped": skipped, "errors": all_errors, "tokens": tokens},
        indent=2, ensure_ascii=False,
    ))
    if all_errors:
        print("\n⚠️  Hubo errores/omisiones. Revisa el detalle arriba.")


if __name__ == "__main__":
    main()
