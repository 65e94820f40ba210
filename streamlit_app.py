# streamlit_app.py  # App administrativa (pareja / dueño de la plataforma).

# =================================================================================  # Separador visual.
# 📊 DASHBOARD ADMINISTRATIVO • Convites                                             # Título de la app.
# ---------------------------------------------------------------------------------  # Separador.
# - Visualiza KPIs del evento (convites, confirmados, recusados, pendientes).       # Descripción 1.
# - Filtra por texto y estado; muestra ocupación de mesas.                          # Descripción 2.
# - Exporta datos filtrados a CSV y a Excel MULTI-HOJA.                              # Descripción 3.
# - Acceso protegido por contraseña (STREAMLIT_PASSWORD) + credenciales de la API.  # Descripción 4.
# =================================================================================  # Fin cabecera.

# 🐍 Importaciones
# ---------------------------------------------------------------------------------
import io  # Buffers de memoria para generar CSV/Excel sin escribir a disco.
import os  # Lectura de variables de entorno (.env).
from datetime import datetime  # Sello de fecha para los nombres de archivo exportados.

import pandas as pd  # Manipulación de datos tabulares (DataFrame).
import streamlit as st  # Framework de UI para el dashboard.
from dotenv import load_dotenv  # Carga variables desde .env.

from ui import api  # Cliente HTTP común (requests) contra la API.

# ⚙️ Configuración inicial
# ---------------------------------------------------------------------------------
load_dotenv()  # Carga .env (STREAMLIT_PASSWORD, ADMIN_API_KEY, API_BASE_URL…).

st.set_page_config(page_title="Dashboard • Convites", layout="wide")  # ✅ Primera llamada Streamlit.

STATUS_LABELS = {"confirmed": "Confirmados", "declined": "Recusados", "pending": "Pendentes"}  # Etiquetas visibles por estado.

# 🛡️ Gate de autenticación (password único del panel)
# ---------------------------------------------------------------------------------
if "authenticated" not in st.session_state:  # Inicializa el flag de sesión.
    st.session_state.authenticated = False

st.sidebar.header("🔑 Acesso")
password_input = st.sidebar.text_input("Senha do painel", type="password", placeholder="Digite a senha…")

if os.getenv("STREAMLIT_PASSWORD") is None:  # Ayuda a diagnosticar un .env incompleto.
    st.sidebar.warning("Não há STREAMLIT_PASSWORD no .env")

if not st.session_state.authenticated:
    if password_input and password_input == os.getenv("STREAMLIT_PASSWORD"):
        st.session_state.authenticated = True
        st.sidebar.success("Acesso concedido!")
        st.rerun()
    elif password_input:
        st.sidebar.error("Senha incorreta.")
if not st.session_state.authenticated:
    st.info("Introduza a senha na barra lateral para aceder ao painel.")
    st.stop()

# 🎯 Evento + credenciales de la API (x-admin-key o token del magic link)
# ---------------------------------------------------------------------------------
event_id = st.sidebar.text_input("ID do evento", value=st.session_state.get("event_id", ""))  # Evento a administrar.
admin_key = st.sidebar.text_input("Chave de administrador", value=os.getenv("ADMIN_API_KEY", ""), type="password")
couple_token = st.sidebar.text_input("Token do casal (magic link)", value=st.session_state.get("couple_token", ""), type="password")

if not event_id:  # Sin evento no hay nada que cargar.
    st.info("Indique o ID do evento na barra lateral.")
    st.stop()
st.session_state["event_id"] = event_id
st.session_state["couple_token"] = couple_token
headers = api.admin_headers(admin_key=admin_key, couple_token=couple_token)  # Cabeceras de autenticación.


# 💾 Carga de datos desde la API (cacheada)
# ---------------------------------------------------------------------------------
@st.cache_data(ttl=120, show_spinner="A carregar dados da API...")  # Cachea 2 minutos.
def load_data(event_id: str, headers: dict):
    """Devuelve (evento, stats, DataFrame de convites, DataFrame de mesas) o lanza RuntimeError."""
    results = {}
    for key, path in (("event", ""), ("stats", "/stats"), ("invites", "/invites"), ("tables", "/tables")):
        ok, data, err = api.admin_get(event_id, path, headers)
        if not ok:
            raise RuntimeError(err)
        results[key] = data

    rows = []  # Una fila por convite, con su RSVP aplanado.
    for inv in results["invites"]:
        rsvp = inv.get("rsvp") or {}
        if not rsvp:
            status = "pending"
        else:
            status = "confirmed" if rsvp.get("attending") else "declined"
        rows.append({
            "label": inv.get("label") or "",
            "token": inv["token"],
            "guests": ", ".join(g["name"] for g in inv.get("guests", [])),
            "max_guests": inv["max_guests"],
            "allow_plus_one": inv["allow_plus_one"],
            "status": status,
            "guest_name": rsvp.get("guest_name"),
            "guests_count": rsvp.get("guests_count", 0),
            "phone": rsvp.get("phone"),
            "message": rsvp.get("message"),
            "table_id": rsvp.get("table_id"),
            "answered_at": rsvp.get("updated_at"),
        })
    invites_df = pd.DataFrame(rows)
    tables_df = pd.DataFrame(
        [{k: tb[k] for k in ("id", "name", "capacity", "current", "available", "is_full")} for tb in results["tables"]],
        columns=["id", "name", "capacity", "current", "available", "is_full"],
    )
    return results["event"], results["stats"], invites_df, tables_df


# 🧪 Intento de carga con manejo de errores
# ---------------------------------------------------------------------------------
try:
    event, stats, df, tables = load_data(event_id, headers)
except RuntimeError as e:  # Credenciales inválidas, evento inexistente o API caída.
    st.error(f"Não foi possível carregar o evento: {e}")
    st.stop()

if df.empty:
    st.warning("Este evento ainda não tem convites.")
    st.stop()

# 🧹 Normalizaciones y columnas derivadas
# ---------------------------------------------------------------------------------
df["guests_count"] = pd.to_numeric(df["guests_count"], errors="coerce").fillna(0).astype(int)  # Cantidad como int.
df["answered_at"] = pd.to_datetime(df["answered_at"])  # NaT para pendientes.
table_names = dict(zip(tables["id"], tables["name"]))  # id → nombre de la mesa.
df["table"] = df["table_id"].map(table_names).fillna("")  # Nombre de la mesa asignada.

# 🎨 Encabezado e indicadores principales
# ---------------------------------------------------------------------------------
capacity = int(df["max_guests"].sum())  # Capacidad teórica (suma de max_guests).
occupancy_pct = (stats["confirmed_guests"] / capacity * 100) if capacity else 0

st.title(f"💍 Painel • {event['title']}")
st.caption(f"/{event['slug']} • {(event.get('date') or '')[:10] or 'sem data'}")
k1, k2, k3, k4, k5 = st.columns(5)
k1.metric("✉️ Convites", stats["total_invites"])
k2.metric("👥 Convidados na lista", stats["total_guests_listed"])
k3.metric("✅ Pessoas confirmadas", stats["confirmed_guests"])
k4.metric("❌ Recusados", stats["declined"])
k5.metric("⏳ Convites pendentes", stats["pending_invites"])
st.progress(min(int(occupancy_pct), 100) / 100.0)
st.caption(f"Capacidade ≈ {capacity} • Ocupação: {occupancy_pct:0.1f}%")

st.markdown("---")

# 🧭 Filtros
# ---------------------------------------------------------------------------------
st.sidebar.header("🎛️ Filtros")
filtered = df.copy()

q = st.sidebar.text_input("Pesquisar (label, nome ou código)")
if q:
    mask = (
        filtered["label"].str.contains(q, case=False, na=False)
        | filtered["guests"].str.contains(q, case=False, na=False)
        | filtered["guest_name"].fillna("").str.contains(q, case=False, na=False)
        | filtered["token"].str.contains(q, case=False, na=False)
    )
    filtered = filtered[mask]

status_sel = st.sidebar.selectbox("Estado", ["Todos"] + list(STATUS_LABELS.values()))
if status_sel != "Todos":
    wanted = {v: k for k, v in STATUS_LABELS.items()}[status_sel]
    filtered = filtered[filtered["status"] == wanted]

# 📋 Tabla de resultados filtrados
# ---------------------------------------------------------------------------------
st.subheader(f"Convites (resultado: {len(filtered)})")
display_cols = [
    "label", "token", "guests", "max_guests", "status", "guest_name",
    "guests_count", "phone", "table", "message", "answered_at",
]
st.dataframe(filtered[display_cols], use_container_width=True)

# 📈 Gráficas rápidas
# ---------------------------------------------------------------------------------
gc1, gc2 = st.columns(2)
with gc1:
    st.markdown("**Distribuição por estado**")
    st.bar_chart(filtered["status"].map(STATUS_LABELS).value_counts(), use_container_width=True)
with gc2:
    st.markdown("**Mesas (ocupação)**")
    if tables.empty:
        st.info("Ainda não há mesas.")
    else:
        st.dataframe(tables[["name", "capacity", "current", "available", "is_full"]], use_container_width=True)

st.markdown("### Respostas por dia")
ts = filtered.dropna(subset=["answered_at"]).copy()
if not ts.empty:
    ts["date"] = ts["answered_at"].dt.date
    st.line_chart(ts.groupby("date").size(), use_container_width=True)
else:
    st.info("Ainda não há respostas para mostrar.")

st.markdown("---")

# ⬇️ Exportaciones (CSV + Excel MULTI-HOJA)
# ---------------------------------------------------------------------------------
st.markdown("### Exportar dados filtrados")
dl1, dl2 = st.columns(2)
stamp = datetime.now().strftime("%Y%m%d")

csv_buffer = io.StringIO()
filtered.to_csv(csv_buffer, index=False, encoding="utf-8")
dl1.download_button(
    label="⬇️ Baixar CSV (filtro aplicado)",
    data=csv_buffer.getvalue(),
    file_name=f"convites_{event['slug']}_{stamp}.csv",
    mime="text/csv",
    use_container_width=True,
)

excel_buffer = io.BytesIO()
with pd.ExcelWriter(excel_buffer, engine="openpyxl") as writer:
    filtered.to_excel(writer, index=False, sheet_name="Geral")
    for key, sheet in STATUS_LABELS.items():
        filtered[filtered["status"] == key].to_excel(writer, index=False, sheet_name=sheet)
    tables.drop(columns=["id"]).to_excel(writer, index=False, sheet_name="Mesas")
dl2.download_button(
    label="⬇️ Baixar Excel (multi-folha)",
    data=excel_buffer.getvalue(),
    file_name=f"convites_{event['slug']}_{stamp}.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    use_container_width=True,
)
