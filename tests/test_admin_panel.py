"""Tests for the Admin Panel page, driven through Streamlit's AppTest harness."""
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from src.app_logic import SESSION_KEY, ProfileDirectory
from src.utils.profiles import Location, Profile, ProfileStore

ADMIN_PAGE = Path(__file__).resolve().parents[1] / "pages" / "2_🛠️_Admin_Panel.py"


@pytest.fixture
def directory():
    store = ProfileStore(
        [
            Profile(
                id="ana",
                name="Ana",
                description="Loves hiking trips",
                address="1 Main St, City",
                location=Location(1.0, 2.0),
            ),
            Profile(id="ben", name="Ben", description="Builds model trains", address="2 High St, Town"),
        ]
    )
    return ProfileDirectory(store=store)


@pytest.fixture
def app(directory, no_secrets):
    at = AppTest.from_file(str(ADMIN_PAGE), default_timeout=10)
    at.session_state[SESSION_KEY] = directory
    return at.run()


def _name_input(at):
    return at.text_input(key=f"name_{at.session_state['form_nonce']}")


def test_edit_prefills_form(app, directory):
    app.button(key="edit_ana").click().run()
    assert directory.editing_profile_id == "ana"
    assert _name_input(app).value == "Ana"


def test_deleting_profile_being_edited_clears_form(app, directory):
    app.button(key="edit_ana").click().run()
    app.button(key="delete_ana").click().run()

    assert "ana" not in directory.store
    assert directory.editing_profile_id is None
    assert _name_input(app).value == ""


def test_deleting_other_profile_keeps_edit_form(app, directory):
    app.button(key="edit_ana").click().run()
    app.button(key="delete_ben").click().run()

    assert directory.editing_profile_id == "ana"
    assert _name_input(app).value == "Ana"
