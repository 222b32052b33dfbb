import pytest
import sqlalchemy.exc
import hoaxify.config
import hoaxify.errors
import hoaxify.services.attachment_service
import hoaxify.services.delete_service
import hoaxify.services.hoax_service
from tests.conftest import AUTH_HEADER, PNG_BYTES

HOAX_BODY = {"content": "This is a hoax with enough characters"}


class TestSubmitHoax:
    def test_anonymous_submit_returns_401(self, client, mocker):
        save = mocker.patch.object(hoaxify.services.hoax_service, "save", mocker.AsyncMock())

        response = client.post("/api/1.0/hoaxes", json=HOAX_BODY)

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "You are not authorized to post hoax"
        save.assert_not_called()

    def test_expired_token_is_treated_as_anonymous(self, client, mocker, authenticated_as):
        authenticated_as(None)
        save = mocker.patch.object(hoaxify.services.hoax_service, "save", mocker.AsyncMock())

        response = client.post("/api/1.0/hoaxes", json=HOAX_BODY, headers=AUTH_HEADER)

        assert response.status_code == 401
        save.assert_not_called()

    def test_authenticated_submit_with_attachment(self, client, mocker, mock_session, authenticated_as):
        authenticated_as(1)
        save = mocker.patch.object(hoaxify.services.hoax_service, "save", mocker.AsyncMock())

        response = client.post(
            "/api/1.0/hoaxes",
            json={**HOAX_BODY, "file_attachment": 5},
            headers=AUTH_HEADER
        )

        assert response.status_code == 200
        save.assert_called_once_with(mock_session, HOAX_BODY["content"], 1, 5)

    def test_short_content_is_rejected(self, client, authenticated_as):
        authenticated_as(1)

        response = client.post("/api/1.0/hoaxes", json={"content": "short"}, headers=AUTH_HEADER)

        assert response.status_code == 400
        assert "content" in response.json()["error"]["details"]["validation_errors"]


class TestListHoaxes:
    def test_list_returns_page(self, client, mocker, mock_session):
        page = {"content": [], "page": 0, "size": 10, "total_pages": 0}
        get_hoaxes = mocker.patch.object(
            hoaxify.services.hoax_service, "get_hoaxes", mocker.AsyncMock(return_value=page)
        )

        response = client.get("/api/1.0/hoaxes")

        assert response.status_code == 200
        assert response.json()["data"] == page
        get_hoaxes.assert_called_once_with(mock_session, 0, 10)

    def test_hoaxes_of_unknown_user_return_404(self, client, mocker):
        mocker.patch.object(
            hoaxify.services.hoax_service, "get_hoaxes",
            mocker.AsyncMock(side_effect=hoaxify.errors.NotFound("User not found"))
        )

        response = client.get("/api/1.0/users/42/hoaxes")

        assert response.status_code == 404

    def test_database_error_returns_persistence_failure(self, client, mocker):
        mocker.patch.object(
            hoaxify.services.hoax_service, "get_hoaxes",
            mocker.AsyncMock(side_effect=sqlalchemy.exc.OperationalError("select", {}, Exception("down")))
        )

        response = client.get("/api/1.0/hoaxes")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "PERSISTENCE_FAILURE"


class TestDeleteHoax:
    def test_anonymous_delete_is_forbidden(self, client, mock_session):
        response = client.delete("/api/1.0/hoaxes/3")

        assert response.status_code == 403
        mock_session.execute.assert_not_called()

    def test_owner_delete(self, client, mocker, mock_session, authenticated_as):
        authenticated_as(1)
        delete_hoax = mocker.patch.object(hoaxify.services.delete_service, "delete_hoax", mocker.AsyncMock())

        response = client.delete("/api/1.0/hoaxes/3", headers=AUTH_HEADER)

        assert response.status_code == 200
        delete_hoax.assert_called_once_with(mock_session, 3, 1)


class TestUploadAttachment:
    def test_upload_returns_attachment_id(self, client, mocker):
        mocker.patch.object(
            hoaxify.services.attachment_service, "save_attachment", mocker.AsyncMock(return_value=3)
        )

        response = client.post(
            "/api/1.0/hoaxes/attachments",
            files={"file": ("image.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"id": 3}

    def test_oversized_upload_is_rejected(self, client, mocker, monkeypatch):
        monkeypatch.setattr(hoaxify.config.settings, "max_attachment_bytes", 16)
        save = mocker.patch.object(hoaxify.services.attachment_service, "save_attachment", mocker.AsyncMock())

        response = client.post(
            "/api/1.0/hoaxes/attachments",
            files={"file": ("image.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 400
        assert "file" in response.json()["error"]["details"]["validation_errors"]
        save.assert_not_called()
