"""
Base HTTP client for the Makuwro API.

Handles session management, the token header, timeouts, and error handling.
Requests are sent exactly once; failures are never retried.
"""

import json
import logging
import threading
from typing import Optional, Dict, Any, Tuple, Union
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import MakuwroConfig
from ..exceptions import (
    MakuwroConnectionError,
    RequestTimeoutError,
    UnknownError,
    raise_from_code,
)

logger = logging.getLogger(__name__)

FormField = Union[Tuple[None, str], Tuple[str, Any, str]]


def encode_form(props: Optional[Dict[str, Any]]) -> Optional[Dict[str, FormField]]:
    """
    Encode properties as multipart form fields.

    Strings and binary values (bytes, bytearray, file objects) pass through
    untouched; every other value is sent as JSON text.

    Args:
        props: Field names and values

    Returns:
        Mapping in the shape ``requests`` expects for ``files=``, or None
    """
    if props is None:
        return None

    form: Dict[str, FormField] = {}
    for key, value in props.items():
        if isinstance(value, str):
            form[key] = (None, value)
        elif isinstance(value, (bytes, bytearray)) or hasattr(value, "read"):
            form[key] = (key, value, "application/octet-stream")
        else:
            form[key] = (None, json.dumps(value))
    return form


def expect_object(data: Any, what: str) -> Dict[str, Any]:
    """Reject a missing or non-object body where a model is expected."""
    if not isinstance(data, dict):
        raise UnknownError(f"Expected {what} in the response body, got {type(data).__name__}")
    return data


class HTTPClient:
    """
    Base HTTP client for the Makuwro API.

    Handles:
    - Session management (single attempt per request)
    - Token header
    - Request timeout
    - Error response handling
    """

    def __init__(self, config: Optional[MakuwroConfig] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Optional configuration. Uses production defaults if not provided.
        """
        self.config = config or MakuwroConfig()
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = requests.Session()

            adapter = HTTPAdapter(max_retries=Retry(total=0, read=False, redirect=False))
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

            self._session.headers.update({
                "User-Agent": f"makuwro-python/{__version__}",
                "Accept": "application/json",
            })

        return self._session

    @property
    def base_url(self) -> str:
        """Get the base URL for REST requests."""
        return self.config.endpoints.rest

    @property
    def token(self) -> Optional[str]:
        return self.config.token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self.config.token = value

    def _get_headers(self, extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Get request headers including the session token."""
        headers = {}

        if self.config.token:
            headers["token"] = self.config.token

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def _handle_response(
        self,
        response: requests.Response,
        parse_body: bool
    ) -> Any:
        """Handle API response and raise the exception bound to its error code."""
        logger.debug(f"Request: {response.request.method} {response.request.url}")
        logger.debug(f"Response: {response.status_code}")

        if response.ok:
            if not parse_body or response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UnknownError(
                    f"Invalid JSON response: {e}",
                    status_code=response.status_code
                )

        try:
            error_data = response.json()
        except ValueError:
            raise UnknownError(
                response.text or f"HTTP {response.status_code}",
                status_code=response.status_code
            )

        raise_from_code(error_data, status_code=response.status_code)

    def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        force_body_parse: bool = False,
    ) -> Any:
        """
        Make an API request.

        Args:
            path: API path relative to the REST base URL
            method: HTTP method (GET, POST, PATCH, DELETE)
            headers: Extra request headers
            body: Encoded multipart fields (see ``encode_form``)
            force_body_parse: Parse the response body for non-GET requests

        Returns:
            Parsed JSON for GET requests or when forced, otherwise None

        Raises:
            RequestTimeoutError: If the exchange does not finish within the timeout
            APIError: If the server rejects the request
        """
        method = method.upper()
        url = urljoin(self.base_url, path.lstrip("/"))
        request_headers = self._get_headers(headers)

        try:
            response = self._send(
                method=method,
                url=url,
                files=body,
                headers=request_headers,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out after {self.config.timeout} seconds",
                details=str(e)
            )
        except requests.exceptions.ConnectionError as e:
            raise MakuwroConnectionError(f"Connection failed: {e}")
        except requests.exceptions.RequestException as e:
            raise MakuwroConnectionError(f"Request failed: {e}")

        return self._handle_response(response, parse_body=method == "GET" or force_body_parse)

    def _send(self, **kwargs) -> requests.Response:
        """
        Run one exchange, bounded by ``config.timeout`` from start to last byte.

        ``requests`` only bounds each socket read, so a server trickling its
        reply would never time out. The exchange runs on a worker thread; if
        it is still running at the deadline the session is abandoned to it
        and closed once the worker finishes.
        """
        session = self.session
        outcome: Dict[str, Any] = {}
        abandoned = threading.Event()

        def exchange() -> None:
            try:
                outcome["response"] = session.request(**kwargs)
            except Exception as e:
                outcome["error"] = e
            finally:
                if abandoned.is_set():
                    session.close()

        worker = threading.Thread(target=exchange, name="makuwro-request", daemon=True)
        worker.start()
        worker.join(self.config.timeout)

        if worker.is_alive():
            abandoned.set()
            if self._session is session:
                self._session = None
            logger.warning("%s %s exceeded %ss deadline", kwargs.get("method"), kwargs.get("url"),
                           self.config.timeout)
            raise RequestTimeoutError(f"Request timed out after {self.config.timeout} seconds")

        if "error" in outcome:
            raise outcome["error"]
        return outcome["response"]

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
