"""
Moodle REST web service client.

Sends parameters to Moodle's REST server in its flattened array format and
cleans every response against the function's returns description, so
callers only ever see values shaped the way the description says.

Moodle Web Services Documentation:
https://docs.moodle.org/dev/Web_service_API_functions
"""

from typing import Any

import httpx

from ..config.models import ClientSettings, ValidatorSettings
from ..schema.models import FunctionDescription
from ..utils.logging import get_logger
from ..validation.validator import clean_returnvalue, validate_parameters

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class MoodleAPIError(Exception):
    """Base exception for Moodle API errors."""

    def __init__(self, message: str, error_code: str | None = None, debug_info: str | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.debug_info = debug_info


class MoodleAuthError(MoodleAPIError):
    """Authentication or authorization error."""

    pass


class MoodleNotFoundError(MoodleAPIError):
    """Resource not found error."""

    pass


class MoodleValidationError(MoodleAPIError):
    """The server rejected the parameters."""

    pass


_AUTH_CODES = ("invalidtoken", "accessexception", "requireloginerror")
_NOT_FOUND_CODES = ("invalidrecord", "cannotfindrecord")
_VALIDATION_CODES = ("invalidparameter", "invalidargument", "invalidresponse")


def flatten_params(params: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested parameters for Moodle's expected format.

    Moodle expects array parameters in the format:
    param[0][key] = value

    Args:
        params: Parameters to flatten
        prefix: Current parameter prefix

    Returns:
        Flattened parameter dictionary
    """
    result: dict[str, Any] = {}

    for key, value in params.items():
        full_key = f"{prefix}[{key}]" if prefix else str(key)

        if value is None:
            continue
        elif isinstance(value, dict):
            result.update(flatten_params(value, full_key))
        elif isinstance(value, (list, tuple)):
            result.update(flatten_params(dict(enumerate(value)), full_key))
        elif isinstance(value, bool):
            result[full_key] = int(value)
        else:
            result[full_key] = value

    return result


class WebServiceClient:
    """
    Moodle REST web service client with description-aware calls.

    Usage:
        with WebServiceClient("https://moodle.example.edu", token) as client:
            client.add_description(signature)
            courses = client.call("core_course_get_courses", options={})
    """

    # Moodle web service response format
    RESPONSE_FORMAT = "json"

    ENDPOINT = "/webservice/rest/server.php"

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        settings: ValidatorSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the web service client.

        Args:
            base_url: Base URL of the Moodle instance (e.g., https://moodle.example.edu)
            token: Web services API token
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            settings: Validator settings used for parameters and responses
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.settings = settings or ValidatorSettings()
        self._transport = transport
        self._client: httpx.Client | None = None
        self._descriptions: dict[str, FunctionDescription] = {}

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> "WebServiceClient":
        return cls(
            base_url=settings.url,
            token=settings.token or "",
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
            **kwargs,
        )

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                verify=self.verify_ssl,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "WebServiceClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def add_description(self, signature: FunctionDescription) -> None:
        """Describe a remote function so its calls get validated."""
        self._descriptions[signature.name] = signature

    def add_descriptions(self, signatures: dict[str, FunctionDescription]) -> None:
        for signature in signatures.values():
            self.add_description(signature)

    def call(self, wsfunction: str, **params: Any) -> Any:
        """
        Call a web service function.

        Parameters are validated and the response cleaned when the function
        has a description; otherwise the raw JSON is returned.

        Args:
            wsfunction: The Moodle web service function name
            **params: Function parameters

        Returns:
            Cleaned response data

        Raises:
            InvalidParameterError: If the parameters do not match the description
            InvalidResponseError: If the response does not match the description
            MoodleAPIError: If the API returns an error or the request fails
            MoodleAuthError: If authentication fails
        """
        signature = self._descriptions.get(wsfunction)
        if signature is not None:
            params = validate_parameters(signature.parameters, params, self.settings)

        data = self._post(wsfunction, params)

        if signature is None:
            return data
        if signature.returns is None:
            return None
        return clean_returnvalue(signature.returns, data, self.settings)

    def _post(self, wsfunction: str, params: dict[str, Any]) -> Any:
        endpoint = f"{self.base_url}{self.ENDPOINT}"

        request_params = {
            "wstoken": self.token,
            "wsfunction": wsfunction,
            "moodlewsrestformat": self.RESPONSE_FORMAT,
            **flatten_params(params),
        }

        logger.debug(f"Calling Moodle API: {wsfunction}")

        try:
            response = self.client.post(endpoint, data=request_params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error calling {wsfunction}: {e}")
            raise MoodleAPIError(f"HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error calling {wsfunction}: {e}")
            raise MoodleAPIError(f"Request failed: {e}") from e

        # Void functions answer with an empty body.
        if not response.content or response.content.strip() == b"null":
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise MoodleAPIError(f"Invalid JSON in response to {wsfunction}") from e

        self._check_error(data, wsfunction)
        return data

    def _check_error(self, data: Any, wsfunction: str) -> None:
        """
        Check API response for errors.

        Raises:
            MoodleAuthError: If authentication/authorization failed
            MoodleNotFoundError: If resource was not found
            MoodleValidationError: If the server rejected the parameters
            MoodleAPIError: For other errors
        """
        if not isinstance(data, dict):
            return

        if "exception" in data or "errorcode" in data:
            error_code = data.get("errorcode", "unknown")
            message = data.get("message", data.get("exception", "Unknown error"))
            debug_info = data.get("debuginfo")

            logger.error(f"Moodle API error in {wsfunction}: [{error_code}] {message}")

            if error_code in _AUTH_CODES:
                raise MoodleAuthError(message, error_code, debug_info)
            elif error_code in _NOT_FOUND_CODES:
                raise MoodleNotFoundError(message, error_code, debug_info)
            elif error_code in _VALIDATION_CODES:
                raise MoodleValidationError(message, error_code, debug_info)
            else:
                raise MoodleAPIError(message, error_code, debug_info)
