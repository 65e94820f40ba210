# pages/4_Fotos.py
# 📸 Photo booth: subida y galería de fotos del evento.

import streamlit as st

from ui import api
from ui.lang_selector import render_lang_selector
from ui.translations import t
from ui.ui import apply_global_styles, read_event_context, render_side_nav

st.set_page_config(page_title="Fotos 📸", layout="centered", initial_sidebar_state="collapsed")

lang = render_lang_selector("lang")
net_err = t("common.net_err", lang)
slug, _ = read_event_context()

if not slug:
    st.warning(t("common.missing_event", lang))
    st.stop()

ok, context, err = api.get_event(slug, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

apply_global_styles(context.get("theme"))
render_side_nav(lang, hide=["photos"])
st.markdown(f"## {t('photos.title', lang)}")

upload = st.file_uploader(t("photos.upload", lang), type=["jpg", "jpeg", "png", "webp"])
if upload is not None and st.button(t("photos.submit", lang), type="primary"):
    ok, _saved, err = api.upload_photo(slug, upload.name, upload.getvalue(), upload.type, lang, net_err)
    if ok:
        st.success(t("photos.success", lang))
    else:
        st.error(err)

ok, photos, err = api.list_photos(slug, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

if not photos:
    st.caption(t("photos.empty", lang))
else:
    cols = st.columns(3)
    for idx, photo in enumerate(photos):
        with cols[idx % 3]:
            url = photo["url"]
            st.image(url if url.startswith("http") else f"{api.API_BASE_URL}{url}", use_container_width=True)
