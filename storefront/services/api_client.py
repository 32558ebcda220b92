# storefront/services/api_client.py
import requests
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaError

from storefront.domain.errors import AuthError, NetworkError, ServerLogicError
from storefront.domain.schemas import Credentials
from storefront.utils.retry import http_retry
from storefront.utils.settings import API_BASE_URL, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ApiClient:
    """
    JSON po HTTP z naglowkiem Authorization: Bearer <token>.
    Kazda odpowiedz to koperta {success, message?, ...payload}:
      - brak tokenu / 401          -> AuthError (zadne zapytanie nie wychodzi bez tokenu)
      - success == false           -> ServerLogicError z message z serwera
      - brak polaczenia / timeout,
        kod spoza 2xx bez koperty  -> NetworkError
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        retry_attempts: int | None = None,
    ):
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        #retry tylko dla GET, mutacje ida jednym strzalem
        self._send_query = http_retry(retry_attempts)(self._send)

    def get(self, path: str, credentials: Credentials) -> dict:
        return self.request("GET", path, credentials)

    def post(self, path: str, credentials: Credentials, json: dict | None = None) -> dict:
        return self.request("POST", path, credentials, json=json)

    def put(self, path: str, credentials: Credentials, json: dict | None = None) -> dict:
        return self.request("PUT", path, credentials, json=json)

    def delete(self, path: str, credentials: Credentials, json: dict | None = None) -> dict:
        return self.request("DELETE", path, credentials, json=json)

    def request(
        self,
        method: str,
        path: str,
        credentials: Credentials,
        json: dict | None = None,
    ) -> dict:
        if credentials is None or not credentials.is_authenticated:
            raise AuthError("Please log in to continue.")

        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {**credentials.auth_header(), "Content-Type": "application/json"}
        logger.info(f"ApiClient {method} {url}")

        sender = self._send_query if method == "GET" else self._send
        try:
            resp = sender(method, url, headers=headers, json=json)
        except requests.Timeout as e:
            logger.error(f"Timeout {method} {url}: {e}")
            raise NetworkError(f"Request to {path} timed out") from e
        except requests.RequestException as e:
            logger.error(f"Blad polaczenia {method} {url}: {e}")
            raise NetworkError("Failed to connect to server. Please try again.") from e

        return self._unwrap(resp, method, path)

    def parse(self, model: type[BaseModel] | TypeAdapter, data, path: str):
        """Walidacja payloadu - niepoprawne dane z serwera traktujemy jak blad sieci."""
        validate = model.validate_python if isinstance(model, TypeAdapter) else model.model_validate
        try:
            return validate(data)
        except SchemaError as e:
            logger.error(f"Niepoprawna odpowiedz {path}: {e}")
            raise NetworkError(f"{path} returned an invalid response") from e

    def _send(self, method: str, url: str, headers: dict, json: dict | None):
        return self.session.request(
            method, url, headers=headers, json=json, timeout=self.timeout
        )

    def _unwrap(self, resp, method: str, path: str) -> dict:
        status = resp.status_code

        if status == 401:
            logger.warning(f"{method} {path} -> 401, token wygasl")
            raise AuthError("Your session has expired. Please log in again.")

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if not 200 <= status < 300:
                raise NetworkError(f"{method} {path} failed with HTTP {status}", status_code=status)
            raise NetworkError(f"{path} returned an invalid response", status_code=status)

        if not body.get("success"):
            message = body.get("message") or f"{method} {path} failed"
            logger.warning(f"{method} {path} -> success=false ({status}): {message}")
            raise ServerLogicError(message, status_code=status, errors=body.get("errors"))

        if not 200 <= status < 300:
            raise NetworkError(f"{method} {path} failed with HTTP {status}", status_code=status)

        return body
