import pytest

from .helpers import make_user


@pytest.fixture
def current_user():
    return make_user()


@pytest.fixture
def other_user():
    return make_user(email="bob@example.com", username="bob")
