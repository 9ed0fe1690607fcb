import pytest

from src.hr_dashboard.hr_dashboard.accounts.service import AuthService
from src.hr_dashboard.hr_dashboard.core.enums import Role
from src.hr_dashboard.hr_dashboard.core.exceptions import (
    AuthenticationError,
    ConflictError,
    UnauthorizedError,
    ValidationError,
)


@pytest.fixture
def auth(accounts_repo):
    return AuthService(accounts_repo)


def test_register_hashes_password_and_normalizes_email(auth, accounts_repo):
    account = auth.register(name="Alice Admin", email=" Alice@Example.com ", password="s3cret-pass")

    stored = accounts_repo.get_by_id(account.account_id)
    assert account.email == "alice@example.com"
    assert account.role == Role.USER
    assert stored.password_hash != "s3cret-pass"


def test_register_duplicate_email_conflicts(auth):
    auth.register(name="Alice", email="alice@example.com", password="s3cret-pass")

    with pytest.raises(ConflictError) as exc:
        auth.register(name="Alice Two", email="ALICE@example.com", password="another-pass")

    assert exc.value.field == "email"


@pytest.mark.parametrize(
    "name, email, password, field",
    [
        ("", "a@example.com", "s3cret-pass", "name"),
        ("Al", "not-an-email", "s3cret-pass", "email"),
        ("Al", "a@example.com", "short", "password"),
    ],
)
def test_register_validates(auth, name, email, password, field):
    with pytest.raises(ValidationError) as exc:
        auth.register(name=name, email=email, password=password)

    assert field in exc.value.errors


def test_authenticate(auth):
    created = auth.register(name="Alice", email="alice@example.com", password="s3cret-pass")

    assert auth.authenticate("ALICE@example.com", "s3cret-pass").account_id == created.account_id
    with pytest.raises(AuthenticationError):
        auth.authenticate("alice@example.com", "wrong-pass")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@example.com", "s3cret-pass")


def test_placeholder_hash_never_authenticates(auth, accounts_repo):
    accounts_repo.create_account(name="Seed", email="seed@example.com", password_hash="CHANGE_ME", role=Role.ADMIN)

    with pytest.raises(AuthenticationError):
        auth.authenticate("seed@example.com", "CHANGE_ME")


def test_current_account(auth):
    created = auth.register(name="Alice", email="alice@example.com", password="s3cret-pass")

    assert auth.current_account(created.account_id).name == "Alice"
    with pytest.raises(UnauthorizedError):
        auth.current_account(None)
    with pytest.raises(UnauthorizedError):
        auth.current_account(404)
