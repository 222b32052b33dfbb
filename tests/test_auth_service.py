import pytest
import hoaxify.errors
import hoaxify.services.auth_service as auth_service
import hoaxify.services.token_service
import hoaxify.utils
from tests.conftest import make_execute_result


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_token(self, mock_session, mock_user, mocker):
        mock_user.password_hash = hoaxify.utils.hash_password("P4ssword")
        mock_session.execute.return_value = make_execute_result(mock_user)
        issue = mocker.patch.object(
            hoaxify.services.token_service, "issue", mocker.AsyncMock(return_value="t" * 32)
        )

        user, token = await auth_service.login(mock_session, "user1@mail.com", "P4ssword")

        assert user is mock_user
        assert token == "t" * 32
        issue.assert_called_once_with(mock_session, mock_user)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [(None, "P4ssword"), ("user1@mail.com", None), ("", "")])
    async def test_missing_credentials(self, mock_session, email, password):
        with pytest.raises(hoaxify.errors.Unauthenticated):
            await auth_service.login(mock_session, email, password)

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_session):
        mock_session.execute.return_value = make_execute_result(None)

        with pytest.raises(hoaxify.errors.Unauthenticated) as exc_info:
            await auth_service.login(mock_session, "nobody@mail.com", "P4ssword")

        assert exc_info.value.message == "Incorrect credentials"

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_session, mock_user, mocker):
        mock_user.password_hash = hoaxify.utils.hash_password("P4ssword")
        mock_session.execute.return_value = make_execute_result(mock_user)
        issue = mocker.patch.object(hoaxify.services.token_service, "issue", mocker.AsyncMock())

        with pytest.raises(hoaxify.errors.Unauthenticated):
            await auth_service.login(mock_session, "user1@mail.com", "Wr0ngPassword")

        issue.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_account(self, mock_session, mock_user, mocker):
        mock_user.password_hash = hoaxify.utils.hash_password("P4ssword")
        mock_user.inactive = True
        mock_session.execute.return_value = make_execute_result(mock_user)
        issue = mocker.patch.object(hoaxify.services.token_service, "issue", mocker.AsyncMock())

        with pytest.raises(hoaxify.errors.Forbidden):
            await auth_service.login(mock_session, "user1@mail.com", "P4ssword")

        issue.assert_not_called()


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_without_token_is_noop(self, mock_session):
        await auth_service.logout(mock_session, None)

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout_revokes(self, mock_session, mocker):
        revoke = mocker.patch.object(hoaxify.services.token_service, "revoke", mocker.AsyncMock())

        await auth_service.logout(mock_session, "a" * 32)

        revoke.assert_called_once_with(mock_session, "a" * 32)
