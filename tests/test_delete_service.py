import pytest
import sqlalchemy.exc
from unittest.mock import MagicMock
import hoaxify.errors
import hoaxify.services.attachment_service
import hoaxify.services.delete_service as delete_service
import hoaxify.services.storage
import hoaxify.services.token_service
from tests.conftest import make_execute_result


def make_hoax(hoax_id=3, user_id=1):
    hoax = MagicMock()
    hoax.id = hoax_id
    hoax.user_id = user_id
    return hoax


class TestDeleteUser:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("requester_id", [None, 2])
    async def test_requester_must_be_the_user(self, mock_session, requester_id):
        with pytest.raises(hoaxify.errors.Forbidden):
            await delete_service.delete_user(mock_session, 1, requester_id)

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_user_is_reported_not_deleted(self, mock_session):
        mock_session.execute.return_value = make_execute_result(None)

        report = await delete_service.delete_user(mock_session, 1, 1)

        assert report == delete_service.DeleteReport()
        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_error_rolls_back(self, mock_session, mock_user, mocker):
        mock_session.execute.side_effect = [
            make_execute_result(mock_user),
            make_execute_result([]),
        ]
        mocker.patch.object(
            hoaxify.services.token_service, "revoke_all_for_user",
            mocker.AsyncMock(side_effect=sqlalchemy.exc.OperationalError("delete", {}, Exception("down")))
        )

        with pytest.raises(sqlalchemy.exc.OperationalError):
            await delete_service.delete_user(mock_session, 1, 1)

        mock_session.rollback.assert_called_once()
        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_profile_image_survives_rolled_back_delete(self, mock_session, mock_user, mocker):
        mock_user.image = "profile-image"
        mock_session.execute.side_effect = [
            make_execute_result(mock_user),
            make_execute_result([]),
        ]
        mock_session.commit.side_effect = sqlalchemy.exc.OperationalError("commit", {}, Exception("down"))
        mocker.patch.object(
            hoaxify.services.token_service, "revoke_all_for_user", mocker.AsyncMock(return_value=0)
        )
        discard = mocker.patch.object(hoaxify.services.storage, "discard_file", mocker.AsyncMock())

        with pytest.raises(sqlalchemy.exc.OperationalError):
            await delete_service.delete_user(mock_session, 1, 1)

        mock_session.rollback.assert_called_once()
        discard.assert_not_called()

    @pytest.mark.asyncio
    async def test_profile_image_removed_after_commit(self, mock_session, mock_user, mocker):
        mock_user.image = "profile-image"
        mock_session.execute.side_effect = [
            make_execute_result(mock_user),
            make_execute_result([]),
            make_execute_result(rowcount=1),
        ]
        mocker.patch.object(
            hoaxify.services.token_service, "revoke_all_for_user", mocker.AsyncMock(return_value=0)
        )
        calls = []
        mock_session.commit.side_effect = lambda: calls.append("commit")

        async def discard(folder, filename):
            calls.append(("discard", filename))
            return True

        mocker.patch.object(hoaxify.services.storage, "discard_file", discard)

        report = await delete_service.delete_user(mock_session, 1, 1)

        assert report.deleted
        assert calls == ["commit", ("discard", "profile-image")]

    @pytest.mark.asyncio
    async def test_file_failures_are_counted_not_raised(self, mock_session, mock_user, mock_attachment, mocker, caplog):
        mock_user.image = "profile-image"
        mock_session.execute.side_effect = [
            make_execute_result(mock_user),
            make_execute_result([make_hoax()]),
            make_execute_result(rowcount=1),
            make_execute_result(rowcount=1),
        ]
        mocker.patch.object(hoaxify.services.storage, "discard_file", mocker.AsyncMock(return_value=False))
        mocker.patch.object(
            hoaxify.services.attachment_service, "find_for_hoax",
            mocker.AsyncMock(return_value=[mock_attachment])
        )
        mocker.patch.object(
            hoaxify.services.attachment_service, "delete_with_file",
            mocker.AsyncMock(return_value=False)
        )
        mocker.patch.object(
            hoaxify.services.token_service, "revoke_all_for_user", mocker.AsyncMock(return_value=2)
        )

        report = await delete_service.delete_user(mock_session, 1, 1)

        assert report == delete_service.DeleteReport(
            deleted=True, hoaxes_removed=1, attachments_removed=1, tokens_revoked=2, files_failed=2
        )
        mock_session.commit.assert_called_once()
        assert "2 stored files left behind" in caplog.text


class TestDeleteHoax:
    @pytest.mark.asyncio
    async def test_anonymous_requester(self, mock_session):
        with pytest.raises(hoaxify.errors.Forbidden):
            await delete_service.delete_hoax(mock_session, 3, None)

    @pytest.mark.asyncio
    async def test_missing_hoax_looks_like_foreign_hoax(self, mock_session):
        mock_session.execute.return_value = make_execute_result(None)

        with pytest.raises(hoaxify.errors.Forbidden):
            await delete_service.delete_hoax(mock_session, 3, 1)

    @pytest.mark.asyncio
    async def test_foreign_hoax(self, mock_session):
        mock_session.execute.return_value = make_execute_result(make_hoax(user_id=2))

        with pytest.raises(hoaxify.errors.Forbidden):
            await delete_service.delete_hoax(mock_session, 3, 1)

        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_owner_delete_commits_once(self, mock_session, mocker):
        mock_session.execute.side_effect = [
            make_execute_result(make_hoax()),
            make_execute_result(rowcount=1),
        ]
        mocker.patch.object(
            hoaxify.services.attachment_service, "find_for_hoax", mocker.AsyncMock(return_value=[])
        )

        report = await delete_service.delete_hoax(mock_session, 3, 1)

        assert report.deleted
        assert report.hoaxes_removed == 1
        mock_session.commit.assert_called_once()
