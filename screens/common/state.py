# screens/common/state.py
# -------------------------------------------------------------------
# Per-browser-session objects shared by every page: settings, the
# local engine, the signed-in AdminSession, the ApiClient built from
# it, and one ListController per resource.
# -------------------------------------------------------------------
from __future__ import annotations

from typing import Dict, Optional

import streamlit as st

from core import session_store
from core.api_client import ApiClient
from core.auth import AdminSession
from core.db import get_engine, init_db
from core.list_controller import ListController
from core.resources import RESOURCES, ResourceApi
from core.settings import Settings, load_settings


def get_settings() -> Settings:
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_settings()
    return st.session_state["settings"]


def get_engine_cached():
    if "engine" not in st.session_state:
        engine = get_engine(get_settings().db.url)
        init_db(engine)
        st.session_state["engine"] = engine
    return st.session_state["engine"]


def auth_flags() -> Dict[str, bool]:
    # plain dict so the 401 hook can flip it from worker threads
    return st.session_state.setdefault("auth_flags", {"expired": False})


def current_session() -> Optional[AdminSession]:
    session = st.session_state.get("admin_session")
    if session is None:
        session = session_store.load(get_engine_cached())
        if session is not None:
            st.session_state["admin_session"] = session
    return session


def _unauthorized_hook(engine, flags: Dict[str, bool]):
    def _hook(session: AdminSession):
        session_store.clear(engine)
        flags["expired"] = True
    return _hook


def get_client() -> ApiClient:
    session = current_session() or AdminSession()
    client = st.session_state.get("api_client")
    if client is None or client.session != session:
        settings = get_settings()
        client = ApiClient(
            settings.api.base_url,
            session=session,
            on_unauthorized=_unauthorized_hook(get_engine_cached(), auth_flags()),
            timeout=settings.api.timeout_seconds,
        )
        st.session_state["api_client"] = client
        st.session_state.pop("controllers", None)
    return client


def get_api(key: str) -> ResourceApi:
    return ResourceApi(get_client(), RESOURCES[key])


def get_controller(key: str) -> ListController:
    client = get_client()
    controllers = st.session_state.setdefault("controllers", {})
    if key not in controllers:
        ui = get_settings().ui
        controllers[key] = ListController(
            ResourceApi(client, RESOURCES[key]),
            limit=ui.page_size,
            debounce_seconds=ui.search_debounce_ms / 1000.0,
        )
    return controllers[key]
