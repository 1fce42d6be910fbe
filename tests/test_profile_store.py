import csv
import io
from datetime import timedelta

import pytest

from errors import AuthError, NotFoundError, RegistrationError
from logic.mock_sheet import SHEET_NAMES, ProfileStore
from models import RegisterData, UserProfile
from storage import parse_iso

from conftest import FIXED_NOW


def _register_data(email="new-user@example.com"):
    return RegisterData(
        Email=email,
        Name="New Parent",
        ParentAge=29,
        BabyBirthDate="2024-05-01",
        PINCode="400001",
        FamilyPreferences="No onion",
    )


def test_login_returns_profile_without_credential(store):
    profile = store.login("user@example.com", "password123")
    assert profile.UserID == "user-1"
    assert not hasattr(profile, "password")
    assert "password123" not in profile.to_dict().values()


def test_login_returns_a_copy(store):
    profile = store.login("user@example.com", "password123")
    profile.Name = "Changed"
    assert store.login("user@example.com", "password123").Name == "Test User"


def test_login_wrong_password(store):
    with pytest.raises(AuthError) as exc:
        store.login("user@example.com", "nope")
    assert exc.value.message == "Invalid email or password."


def test_login_unknown_email(store):
    with pytest.raises(AuthError):
        store.login("nobody@example.com", "password123")


def test_login_expired_registration(store):
    with pytest.raises(AuthError) as exc:
        store.login("expired@example.com", "password123")
    assert "expired" in exc.value.message


def test_login_at_expiry_instant_succeeds():
    at_expiry = ProfileStore(clock=lambda: parse_iso("2024-01-01T23:59:59Z"), latency_scale=0)
    assert at_expiry.login("expired@example.com", "password123").UserID == "user-4"


def test_placeholder_cannot_log_in(store):
    with pytest.raises(AuthError):
        store.login("new-user@example.com", "")


def test_register_completes_placeholder(store):
    profile = store.register(_register_data(), "secret")
    assert profile.UserID == "user-3"
    assert profile.Name == "New Parent"
    assert profile.userType == "user"
    start = parse_iso(profile.RegistrationDate)
    assert start == FIXED_NOW
    assert parse_iso(profile.RegistrationExpiry) - start == timedelta(days=90)

    again = store.login("new-user@example.com", "secret")
    assert again.PINCode == "400001"


def test_register_unknown_email_is_refused(store):
    with pytest.raises(RegistrationError):
        store.register(_register_data("stranger@example.com"), "secret")
    assert all(u.Email != "stranger@example.com" for u in store.list_users())


def test_register_refuses_already_registered_account(store):
    with pytest.raises(RegistrationError):
        store.register(_register_data("user@example.com"), "hijacked")
    assert store.login("user@example.com", "password123").Name == "Test User"
    with pytest.raises(AuthError):
        store.login("user@example.com", "hijacked")


def test_register_twice_on_same_placeholder(store):
    store.register(_register_data(), "secret")
    with pytest.raises(RegistrationError):
        store.register(_register_data(), "other")
    assert store.login("new-user@example.com", "secret").Name == "New Parent"


def test_reset_password(store):
    store.reset_password("user@example.com", "fresh")
    assert store.login("user@example.com", "fresh").UserID == "user-1"
    with pytest.raises(AuthError):
        store.login("user@example.com", "password123")


def test_reset_password_unknown_email(store):
    with pytest.raises(NotFoundError) as exc:
        store.reset_password("nobody@example.com", "x")
    assert exc.value.message == "No user found with this email address."


def test_dashboard_stats(store):
    stats = store.get_dashboard_stats()
    assert stats.activeUsers == 4
    assert stats.newSignups == 1
    assert stats.mealPlansGenerated == 1
    assert stats.interactions == 4
    assert [(m.name, m.interactions) for m in stats.interactionData] == [
        ("Planner", 1),
        ("Meals", 1),
        ("Check-ins", 2),
    ]


def _read_csv(text):
    return list(csv.reader(io.StringIO(text)))


def test_export_users_header_and_no_credentials(store):
    rows = _read_csv(store.export_sheet("Users"))
    assert tuple(rows[0]) == UserProfile.COLUMNS
    assert len(rows) == 5
    text = store.export_sheet("Users")
    assert "password123" not in text
    assert "admin123" not in text


def test_export_placeholder_has_empty_cells(store):
    rows = _read_csv(store.export_sheet("Users"))
    placeholder = dict(zip(rows[0], rows[3]))
    assert placeholder["Email"] == "new-user@example.com"
    assert placeholder["Name"] == ""
    assert placeholder["BabyBirthDate"] == ""


def test_export_empty_store_is_header_only():
    empty = ProfileStore(latency_scale=0, seed=False)
    for name in SHEET_NAMES:
        text = empty.export_sheet(name)
        assert text.count("\n") == 1
    assert _read_csv(empty.export_sheet("Users")) == [list(UserProfile.COLUMNS)]


def test_export_recipes_serialises_lists_and_bools(store):
    rows = _read_csv(store.export_sheet("Recipes"))
    record = dict(zip(rows[0], rows[1]))
    assert record["Ingredients"] == '["Oats", "Water"]'
    assert record["SuitableFor"] == "Baby"
    assert record["LocalIngredientUsed"] == "false"
    assert record["Notes"] == ""


def test_export_unknown_sheet(store):
    with pytest.raises(NotFoundError):
        store.export_sheet("Payments")


def test_latency_is_scaled():
    slept = []
    slow = ProfileStore(latency_scale=2, sleep=slept.append)
    slow.get_dashboard_stats()
    assert slept == [pytest.approx(0.6)]
