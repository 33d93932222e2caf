"""HTTP client for the library backend service.

Every console operation goes through this client. It owns the
requests session, the bearer token and the mapping of transport and HTTP
failures onto the BackendError hierarchy. It never retries.
"""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Base exception for backend service errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class BackendAuthError(BackendError):
    """Raised when the backend rejects the credentials or token."""

    pass


class BackendNotFoundError(BackendError):
    """Raised when the requested entity does not exist."""

    pass


class BackendConflictError(BackendError):
    """Raised when the backend rejects a mutation due to current state."""

    pass


class BackendResponseError(BackendError):
    """Raised when a response does not have the expected shape."""

    pass


_STATUS_ERRORS = {
    401: BackendAuthError,
    403: BackendAuthError,
    404: BackendNotFoundError,
    409: BackendConflictError,
}


class BackendClient:
    """Client for the library backend REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        token: Optional[str] = None,
    ):
        """Initialize client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            timeout: Request timeout in seconds
            token: Bearer token from a previous login
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": "libraryconsole/0.1",
            "Accept": "application/json",
        })
        self.set_token(token)

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        """Set or clear the bearer token sent with every request."""
        self._token = token
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        else:
            self._session.headers.pop("Authorization", None)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make a request and return the decoded JSON body.

        Returns None for empty bodies (e.g. 204 No Content).

        Raises:
            BackendError: on timeout, connection failure or HTTP error status
            BackendResponseError: if the body is not valid JSON
        """
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method, url, json=json, params=params, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.warning("%s %s timed out", method, url)
            raise BackendError("Request timed out")
        except requests.exceptions.HTTPError as e:
            raise self._http_error(method, url, e.response)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise BackendError(f"Request failed: {e}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise BackendResponseError(
                "Response is not valid JSON", status_code=response.status_code
            )

    def _http_error(
        self, method: str, url: str, response: requests.Response
    ) -> BackendError:
        status = response.status_code
        server_message = None
        try:
            body = response.json()
            if isinstance(body, dict):
                server_message = body.get("message") or body.get("error")
        except ValueError:
            pass

        logger.warning("%s %s rejected with %s: %s", method, url, status, server_message)
        error_cls = _STATUS_ERRORS.get(status, BackendError)
        message = server_message or f"HTTP error: {status}"
        return error_cls(message, status_code=status, server_message=server_message)

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[Any] = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Optional[Any] = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._session.close()
