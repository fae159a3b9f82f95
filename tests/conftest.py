"""Shared fixtures for FormStash tests."""

import pytest

from formstash import EngineRegistry, Form, FormControl, MemoryStorage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def registry(storage):
    registry = EngineRegistry(default_storage=storage)
    yield registry
    registry.clear()


@pytest.fixture
def signup_form():
    """A form with one control of every kind."""
    return Form(
        [
            FormControl(name="email", type="email"),
            FormControl(name="bio", tag="textarea"),
            FormControl(name="password", type="password"),
            FormControl(name="newsletter", type="checkbox", value="yes"),
            FormControl(name="topics[]", type="checkbox", value="a"),
            FormControl(name="topics[]", type="checkbox", value="b"),
            FormControl(name="topics[]", type="checkbox", value="c"),
            FormControl(name="plan", type="radio", value="free"),
            FormControl(name="plan", type="radio", value="pro"),
            FormControl(name="country", tag="select", options=["fr", "de", "it"]),
            FormControl(name="avatar", type="file"),
            FormControl(name="send", type="submit", value="Send"),
            FormControl(tag="button", type="button"),
        ],
        id="signup",
        name="account",
    )
