import pytest
from sqlalchemy import func, select

from mediahub.core.errors import AccessDenied, DuplicateEmail, DuplicateUsername, InvalidCredentials
from mediahub.models.session import UserSession
from mediahub.schemas.user import UserCreate
from mediahub.services import users as user_service
from mediahub.services.auth import AuthService, hash_password


def _payload(**overrides) -> UserCreate:
    data = {"username": "alice", "email": "alice@x.com", "password": "secret123"}
    data.update(overrides)
    return UserCreate(**data)


async def _session_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(UserSession))
    return result.scalar_one()


async def _add_user(session, username, password, is_admin=False):
    user = await user_service.create_user(
        session,
        username=username,
        email=f"{username}@x.com",
        password_hash=await hash_password(password),
        is_admin=is_admin,
    )
    await session.commit()
    return user


@pytest.mark.asyncio
async def test_register_creates_non_admin_and_live_session(database, session_manager):
    async with database.session() as session:
        auth = AuthService(session, session_manager)
        result = await auth.register(_payload(is_admin=True, first_name="Alice"))

        assert result.user.username == "alice"
        assert result.user.is_admin is False
        assert result.user.first_name == "Alice"
        assert "password" not in result.user.model_dump()
        assert "password_hash" not in result.user.model_dump()

        principal = await auth.current_principal(result.session_id)
        assert principal is not None
        assert principal.id == result.user.id


@pytest.mark.asyncio
async def test_register_duplicates(database, session_manager):
    async with database.session() as session:
        auth = AuthService(session, session_manager)
        await auth.register(_payload())
        with pytest.raises(DuplicateUsername):
            await auth.register(_payload(email="other@x.com"))
        with pytest.raises(DuplicateEmail):
            await auth.register(_payload(username="alice2", email="ALICE@x.com"))


@pytest.mark.asyncio
async def test_login_and_logout(database, session_manager):
    async with database.session() as session:
        auth = AuthService(session, session_manager)
        registered = await auth.register(_payload())

        result = await auth.login("alice", "secret123")
        assert result.session_id != registered.session_id
        assert (await auth.current_principal(result.session_id)).id == registered.user.id

        await auth.logout(result.session_id)
        assert await auth.current_principal(result.session_id) is None
        # Other sessions of the same user are untouched.
        assert await auth.current_principal(registered.session_id) is not None

        await auth.logout(result.session_id)
        await auth.logout(None)


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(database, session_manager):
    async with database.session() as session:
        auth = AuthService(session, session_manager)
        await auth.register(_payload())

        with pytest.raises(InvalidCredentials) as wrong_password:
            await auth.login("alice", "wrongpass")
        with pytest.raises(InvalidCredentials) as unknown_user:
            await auth.login("nobody", "secret123")

    assert wrong_password.value.message == unknown_user.value.message


@pytest.mark.asyncio
async def test_admin_login(database, session_manager):
    async with database.session() as session:
        await _add_user(session, "root", "rootpassword", is_admin=True)
        auth = AuthService(session, session_manager)

        result = await auth.admin_login("root", "rootpassword")
        assert result.user.is_admin is True
        assert await auth.current_principal(result.session_id) is not None


@pytest.mark.asyncio
async def test_admin_login_rejections_create_no_session(database, session_manager):
    async with database.session() as session:
        await _add_user(session, "bob", "bobpassword")
        await _add_user(session, "root", "rootpassword", is_admin=True)
        auth = AuthService(session, session_manager)

        with pytest.raises(AccessDenied):
            await auth.admin_login("bob", "bobpassword")
        with pytest.raises(InvalidCredentials):
            await auth.admin_login("bob", "wrongpassword")
        with pytest.raises(InvalidCredentials):
            await auth.admin_login("root", "wrongpassword")

        assert await _session_count(session) == 0


@pytest.mark.asyncio
async def test_current_principal_for_deleted_user_is_none(database, session_manager):
    async with database.session() as session:
        auth = AuthService(session, session_manager)
        result = await auth.register(_payload())

        assert await user_service.delete_user(session, result.user.id)
        await session.commit()

        assert await auth.current_principal(result.session_id) is None
        assert await auth.current_principal(None) is None
        assert await auth.current_principal("unknown") is None
