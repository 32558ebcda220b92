import pytest
import requests

from storefront.domain.errors import AuthError, NetworkError, ServerLogicError
from storefront.services.api_client import ApiClient
from tests.conftest import BASE_URL


@pytest.fixture
def api(session):
    return ApiClient(base_url=BASE_URL, session=session)


class TestApiClient:
    def test_sends_bearer_token_and_returns_body(self, api, session, credentials):
        session.route("GET", "/cart/count", {"success": True, "count": 3})

        body = api.get("/cart/count", credentials)

        assert body["count"] == 3
        assert session.calls[0].headers["Authorization"] == "Bearer tok-123"

    def test_missing_token_fails_before_any_request(self, api, session, anonymous):
        with pytest.raises(AuthError):
            api.get("/cart", anonymous)
        assert session.calls == []

    def test_401_is_auth_error(self, api, session, credentials):
        session.route("GET", "/cart", {"success": False, "message": "Unauthorized"}, status=401)
        with pytest.raises(AuthError, match="expired"):
            api.get("/cart", credentials)

    def test_success_false_is_server_logic_error_with_message(self, api, session, credentials):
        session.route("POST", "/cart/add", {"success": False, "message": "Insufficient stock"}, status=400)

        with pytest.raises(ServerLogicError) as exc:
            api.post("/cart/add", credentials, json={"product_id": 1, "quantity": 99})

        assert exc.value.message == "Insufficient stock"
        assert exc.value.status_code == 400

    def test_success_false_with_http_200(self, api, session, credentials):
        session.route("GET", "/order/list", {"success": False, "message": "Nope"})
        with pytest.raises(ServerLogicError, match="Nope"):
            api.get("/order/list", credentials)

    def test_connection_failure_is_network_error(self, api, session, credentials):
        session.route("GET", "/cart", error=requests.ConnectionError("refused"))
        with pytest.raises(NetworkError, match="Failed to connect"):
            api.get("/cart", credentials)

    def test_timeout_is_network_error(self, api, session, credentials):
        session.route("POST", "/order/place", error=requests.Timeout("slow"))
        with pytest.raises(NetworkError, match="timed out"):
            api.post("/order/place", credentials, json={})

    def test_non_json_error_page_is_network_error(self, api, session, credentials):
        session.route("GET", "/cart", status=502)
        with pytest.raises(NetworkError) as exc:
            api.get("/cart", credentials)
        assert exc.value.status_code == 502

    def test_mutations_are_not_retried(self, session, credentials):
        api = ApiClient(base_url=BASE_URL, session=session, retry_attempts=3)
        session.route("PUT", "/cart/update", error=requests.ConnectionError("refused"))

        with pytest.raises(NetworkError):
            api.put("/cart/update", credentials, json={"product_id": 1, "quantity": 2})

        assert len(session.calls) == 1

    def test_queries_retry_when_configured(self, session, credentials):
        api = ApiClient(base_url=BASE_URL, session=session, retry_attempts=2)
        session.route("GET", "/cart/count", error=requests.ConnectionError("refused"))

        with pytest.raises(NetworkError):
            api.get("/cart/count", credentials)

        assert len(session.calls) == 2
