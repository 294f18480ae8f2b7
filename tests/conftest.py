"""Test configuration and fixtures."""

import logfire
import pytest

from tests.entities import Book, Post, User

# Keep spans local; nothing is exported during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def alice() -> User:
    return User.create("alice")


@pytest.fixture
def bob() -> User:
    return User.create("bob")


@pytest.fixture
def post() -> Post:
    return Post.create("Hello world")


@pytest.fixture
def book() -> Book:
    return Book.create("Dune")
