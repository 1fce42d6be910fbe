import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import gradio as gr

from errors import ProfileMissingError, WellnessHubError
from models import RegisterData, UserProfile
from storage import (
    SESSION_USER_KEY,
    KeyValueStorage,
    parse_iso,
    to_iso,
    utc_now,
)
from .mock_sheet import ProfileStore, profile_store

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass
class Session:
    """
    Context handed to every workflow call.

    Holds a copy of the current profile; the profile store stays the source
    of truth. Created on login / register / restore, dropped on logout.
    """

    profile: UserProfile
    started_at: str

    @property
    def user_id(self) -> str:
        return self.profile.UserID

    @property
    def is_admin(self) -> bool:
        return self.profile.is_admin


def require_session(session: Optional[Session]) -> Session:
    if session is None:
        raise ProfileMissingError("User data not found. Please log in again.")
    return session


class AuthController:
    """
    Unauthenticated -> Authenticating -> Authenticated, and back on logout.

    login and register persist the returned profile (never a credential)
    under SESSION_USER_KEY; restore() reads it back on page load. One
    controller is built per request over that browser's storage, starting
    from the session it already holds.
    """

    def __init__(
        self,
        store: ProfileStore,
        session_storage: KeyValueStorage,
        session: Optional[Session] = None,
    ):
        self.store = store
        self.session_storage = session_storage
        self.session = session
        self.state = AuthState.AUTHENTICATED if session else AuthState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def _open(self, profile: UserProfile) -> Session:
        session = Session(profile=profile, started_at=to_iso(utc_now()))
        self.session_storage.set_item(SESSION_USER_KEY, json.dumps(profile.to_dict()))
        self.session = session
        self.state = AuthState.AUTHENTICATED
        return session

    def restore(self) -> Optional[Session]:
        raw = self.session_storage.get_item(SESSION_USER_KEY)
        if raw is None:
            self.session = None
            self.state = AuthState.UNAUTHENTICATED
            return None
        try:
            profile = UserProfile.from_dict(json.loads(raw))
        except ValueError as e:
            logger.warning("Failed to parse user from session storage: %s", e)
            self.session_storage.remove_item(SESSION_USER_KEY)
            self.session = None
            self.state = AuthState.UNAUTHENTICATED
            return None
        self.session = Session(profile=profile, started_at=to_iso(utc_now()))
        self.state = AuthState.AUTHENTICATED
        return self.session

    def login(self, email: str, password: str) -> Session:
        self.state = AuthState.AUTHENTICATING
        try:
            profile = self.store.login(email, password)
        except Exception:
            self.state = AuthState.AUTHENTICATED if self.session else AuthState.UNAUTHENTICATED
            raise
        return self._open(profile)

    def register(self, data: RegisterData, password: str) -> Session:
        self.state = AuthState.AUTHENTICATING
        try:
            profile = self.store.register(data, password)
        except Exception:
            self.state = AuthState.AUTHENTICATED if self.session else AuthState.UNAUTHENTICATED
            raise
        return self._open(profile)

    def reset_password(self, email: str, new_password: str) -> None:
        # the current session, if any, is left untouched
        self.store.reset_password(email, new_password)

    def logout(self) -> None:
        self.session = None
        self.state = AuthState.UNAUTHENTICATED
        self.session_storage.remove_item(SESSION_USER_KEY)


# ================== Gradio callbacks ==================
#
# `saved` is the browser's gr.BrowserState dict; every auth callback returns
# the updated dict right after the session so the browser keeps its own copy.


def _controller(saved, session_state, store: ProfileStore) -> AuthController:
    return AuthController(store, KeyValueStorage(saved), session=session_state)


def _panels(session: Optional[Session], show: str = "login"):
    """Visibility of login / register / reset / main panels and the admin button."""
    if session is not None:
        return (
            gr.update(visible=False),
            gr.update(visible=False),
            gr.update(visible=False),
            gr.update(visible=True),
            gr.update(visible=session.is_admin),
        )
    return (
        gr.update(visible=(show == "login")),
        gr.update(visible=(show == "register")),
        gr.update(visible=(show == "reset")),
        gr.update(visible=False),
        gr.update(visible=False),
    )


def welcome_text(session: Optional[Session]) -> str:
    if session is None:
        return ""
    return f"## Welcome, {session.profile.Name or session.profile.Email}!"


def restore_session_action(saved, store: ProfileStore = profile_store):
    controller = _controller(saved, None, store)
    session = controller.restore()
    msg = "" if session is None else "Session restored."
    return (
        msg,
        session,
        controller.session_storage.data,
        *_panels(session),
        welcome_text(session),
    )


def login_action(email, password, session_state, saved, store: ProfileStore = profile_store):
    if not email or not password:
        return (
            "Please enter both email and password.",
            session_state,
            saved,
            *_panels(session_state),
            welcome_text(session_state),
        )
    controller = _controller(saved, session_state, store)
    try:
        session = controller.login(email.strip(), password)
    except WellnessHubError as e:
        return (e.message, session_state, saved, *_panels(session_state), welcome_text(session_state))

    return (
        "Login successful.",
        session,
        controller.session_storage.data,
        *_panels(session),
        welcome_text(session),
    )


def show_register_panel():
    return gr.update(visible=False), gr.update(visible=True), gr.update(visible=False)


def show_reset_panel():
    return gr.update(visible=False), gr.update(visible=False), gr.update(visible=True)


def back_to_login_panel():
    return gr.update(visible=True), gr.update(visible=False), gr.update(visible=False)


def register_action(
    name,
    parent_age,
    baby_birth_date,
    pin_code,
    preferences,
    email,
    password,
    password2,
    session_state,
    saved,
    store: ProfileStore = profile_store,
):
    def fail(msg):
        return (
            msg,
            session_state,
            saved,
            *_panels(session_state, "register"),
            welcome_text(session_state),
        )

    if not email or not password:
        return fail("Email and password are required.")
    if password != password2:
        return fail("Passwords do not match.")
    try:
        age = int(parent_age)
    except (TypeError, ValueError):
        return fail("Please enter a valid parent age.")
    try:
        parse_iso(baby_birth_date or "")
    except ValueError:
        return fail("Please enter the baby's date of birth as YYYY-MM-DD.")

    data = RegisterData(
        Email=email.strip(),
        Name=(name or "").strip(),
        ParentAge=age,
        BabyBirthDate=baby_birth_date.strip(),
        PINCode=(pin_code or "").strip(),
        FamilyPreferences=(preferences or "").strip(),
    )
    controller = _controller(saved, session_state, store)
    try:
        session = controller.register(data, password)
    except WellnessHubError as e:
        return fail(e.message)

    msg = f"Registration successful. Welcome, {session.profile.Name}!"
    return (
        msg,
        session,
        controller.session_storage.data,
        *_panels(session),
        welcome_text(session),
    )


def request_reset_action(email):
    """First step of the reset flow: only checks that an email was given."""
    if not email:
        return "Please enter your email address.", gr.update(visible=False)
    return f"Setting a new password for **{email}**.", gr.update(visible=True)


def reset_password_action(email, password, password2, store: ProfileStore = profile_store):
    if password != password2:
        return "Passwords do not match.", gr.update(), gr.update()
    if not password:
        return "Password cannot be empty.", gr.update(), gr.update()
    try:
        store.reset_password((email or "").strip(), password)
    except WellnessHubError as e:
        return e.message, gr.update(), gr.update()

    return (
        "Password has been reset successfully! Please log in.",
        gr.update(visible=True),   # login panel
        gr.update(visible=False),  # reset panel
    )


def logout_action(session_state, saved, store: ProfileStore = profile_store):
    controller = _controller(saved, session_state, store)
    controller.logout()
    return (
        "You have been logged out.",
        None,
        controller.session_storage.data,
        *_panels(None),
        "",
    )
