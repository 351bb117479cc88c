import asyncio
import logging

import streamlit as st

from core.data import FILE_SERVER_URL, rows_to_csv
from core.loader import ViewerSession, http_fetcher, local_fetcher
from core.render import TABLE_CSS, page_label, render_table_html
from core.state import filtered_rows

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    st.markdown(TABLE_CSS, unsafe_allow_html=True)


def get_session(server_url: str) -> ViewerSession:
    """Return the per-browser session, rebuilding its fetcher when the source changes."""
    session = st.session_state.get("viewer_session")
    if session is None:
        session = ViewerSession()
        st.session_state["viewer_session"] = session
    source = server_url.strip()
    if st.session_state.get("_viewer_source") != source:
        session.fetch = http_fetcher(source) if source else local_fetcher()
        st.session_state["_viewer_source"] = source
        st.session_state["_viewer_loaded"] = None
    return session


# ---------- UI setup ----------
st.set_page_config(page_title="Excel Data Viewer", layout="wide")
inject_base_styles()
st.title("Excel Data Viewer")

with st.sidebar:
    with st.expander("Advanced settings", expanded=False):
        server_url = st.text_input(
            "File server URL",
            value="",
            placeholder=FILE_SERVER_URL,
            help="Leave blank to read the files from the local data folder.",
        )

session = get_session(server_url)
files = list(session.state.files)
st.session_state.setdefault("selected_file", session.state.selected_file)
st.session_state.setdefault("search_query", session.state.query)

c1, c2 = st.columns([1, 2])
with c1:
    selected_file = st.selectbox("File", options=files, key="selected_file")
with c2:
    query = st.text_input("Search", key="search_query", placeholder="Search...")

if st.session_state.get("_viewer_loaded") != selected_file:
    asyncio.run(session.select_file(selected_file))
    st.session_state["_viewer_loaded"] = selected_file

if query != session.state.query:
    session.change_query(query)

table = session.view()
st.markdown(render_table_html(table), unsafe_allow_html=True)

nav = st.columns([1, 4, 1])
nav[0].button("Previous", key="prev_btn", disabled=not table.page.has_previous, on_click=session.previous_page)
nav[1].markdown(f"<div style='text-align:center;color:#4b5563;'>{page_label(table.page)}</div>", unsafe_allow_html=True)
nav[2].button("Next", key="next_btn", disabled=not table.page.has_next, on_click=session.next_page)

if table.headers:
    st.download_button(
        "Export CSV",
        data=rows_to_csv(filtered_rows(session.state), table.headers),
        file_name=selected_file.rsplit(".", 1)[0] + ".csv",
        mime="text/csv",
    )
