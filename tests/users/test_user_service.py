import pytest
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.core.exceptions import AuthenticationError, ValidationError
from src.timeclock.timeclock.users.model import User
from src.timeclock.timeclock.users.service import AuthService, UserService


def test_register_then_login(user_repo):
    user_id = UserService(user_repo).register(full_name="Ana Souza", username="ana", password="secret1")

    stored = user_repo.get_by_id(user_id)
    assert stored.role == Role.EMPLOYEE
    assert stored.password_hash != "secret1"

    session_user = AuthService(user_repo).authenticate("ana", "secret1")
    assert (session_user.user_id, session_user.full_name) == (user_id, "Ana Souza")


@pytest.mark.parametrize(
    "full_name,username,password",
    [
        ("", "ana", "secret1"),
        ("Ana", "ana souza", "secret1"),
        ("Ana", "ana", "short"),
    ],
)
def test_register_validation(user_repo, full_name, username, password):
    with pytest.raises(ValidationError):
        UserService(user_repo).register(full_name=full_name, username=username, password=password)
    assert user_repo.users == {}


def test_register_rejects_duplicate_username(user_repo):
    service = UserService(user_repo)
    service.register(full_name="Ana", username="ana", password="secret1")
    with pytest.raises(ValidationError):
        service.register(full_name="Other", username="ana", password="secret2")


def test_wrong_password_and_inactive_user_fail_the_same_way(user_repo):
    user_repo.add(User("u1", "Ana", "ana", generate_password_hash("secret1")))
    user_repo.add(User("u2", "Bo", "bo", generate_password_hash("secret1"), is_active=False))
    auth = AuthService(user_repo)

    for username, password in (("ana", "wrong"), ("bo", "secret1"), ("nobody", "secret1")):
        with pytest.raises(AuthenticationError) as exc:
            auth.authenticate(username, password)
        assert str(exc.value) == "Invalid username or password"


def test_unreadable_hash_counts_as_wrong_password(user_repo):
    user_repo.add(User("u1", "Ana", "ana", "not-a-hash"))
    with pytest.raises(AuthenticationError):
        AuthService(user_repo).authenticate("ana", "secret1")
