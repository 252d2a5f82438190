"""Tests for the REST web service client, using httpx's mock transport."""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from moodle_external.client import (
    MoodleAPIError,
    MoodleAuthError,
    MoodleNotFoundError,
    MoodleValidationError,
    WebServiceClient,
    flatten_params,
)
from moodle_external.config import ClientSettings
from moodle_external.errors import InvalidParameterError, InvalidResponseError
from moodle_external.params import ParamType
from moodle_external.schema import (
    ExternalValue,
    FunctionDescription,
    FunctionParameters,
    MultipleStructure,
    Requirement,
    SingleStructure,
)

BASE_URL = "https://moodle.example.edu"

GET_COURSES = FunctionDescription(
    name="core_course_get_courses",
    parameters=FunctionParameters(
        {
            "options": SingleStructure(
                {"ids": MultipleStructure(ExternalValue(ParamType.INT), "ids", Requirement.OPTIONAL)},
                "options",
                Requirement.DEFAULT,
                {},
            )
        }
    ),
    returns=MultipleStructure(
        SingleStructure(
            {
                "id": ExternalValue(ParamType.INT),
                "fullname": ExternalValue(ParamType.TEXT),
                "visible": ExternalValue(ParamType.BOOL),
            }
        )
    ),
)


class RecordingHandler:
    """Mock transport handler that records requests and replies with a fixed response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    def form(self, index: int = -1) -> dict[str, list[str]]:
        return parse_qs(self.requests[index].content.decode())


def make_client(response: httpx.Response) -> tuple[WebServiceClient, RecordingHandler]:
    handler = RecordingHandler(response)
    client = WebServiceClient(BASE_URL + "/", "secret", transport=httpx.MockTransport(handler))
    client.add_description(GET_COURSES)
    return client, handler


def test_flatten_params():
    flat = flatten_params({"options": {"ids": [1, 2]}, "flag": True, "skip": None, "name": "x"})
    assert flat == {"options[ids][0]": 1, "options[ids][1]": 2, "flag": 1, "name": "x"}


def test_flatten_list_of_structures():
    flat = flatten_params({"users": [{"id": 1, "tags": ["a"]}]})
    assert flat == {"users[0][id]": 1, "users[0][tags][0]": "a"}


def test_call_validates_and_cleans():
    response = httpx.Response(
        200,
        json=[{"id": "2", "fullname": "Algebra", "visible": 1, "format": "topics"}],
    )
    client, handler = make_client(response)

    with client:
        result = client.call("core_course_get_courses", options={"ids": ["2"]})

    assert result == [{"id": 2, "fullname": "Algebra", "visible": True}]

    request = handler.requests[0]
    assert str(request.url) == f"{BASE_URL}/webservice/rest/server.php"
    form = handler.form()
    assert form["wstoken"] == ["secret"]
    assert form["wsfunction"] == ["core_course_get_courses"]
    assert form["moodlewsrestformat"] == ["json"]
    assert form["options[ids][0]"] == ["2"]


def test_invalid_parameters_are_not_sent():
    client, handler = make_client(httpx.Response(200, json=[]))

    with pytest.raises(InvalidParameterError) as exc_info:
        client.call("core_course_get_courses", options={"ids": ["two"]})

    assert exc_info.value.path == ("options", "ids")
    assert handler.requests == []


def test_invalid_response_raises():
    client, _ = make_client(httpx.Response(200, json=[{"id": 1, "fullname": "Algebra"}]))

    with pytest.raises(InvalidResponseError) as exc_info:
        client.call("core_course_get_courses")
    assert exc_info.value.path == ("visible",)


def test_undescribed_function_returns_raw_json():
    client, handler = make_client(httpx.Response(200, json={"sitename": "Campus"}))

    assert client.call("core_webservice_get_site_info") == {"sitename": "Campus"}
    assert len(handler.requests) == 1


def test_void_response():
    client, _ = make_client(httpx.Response(200, content=b"null"))
    client.add_description(
        FunctionDescription(name="core_void", parameters=FunctionParameters({}), returns=None)
    )

    assert client.call("core_void") is None


@pytest.mark.parametrize(
    "errorcode, error_class",
    [
        ("invalidtoken", MoodleAuthError),
        ("invalidrecord", MoodleNotFoundError),
        ("invalidparameter", MoodleValidationError),
        ("somethingelse", MoodleAPIError),
    ],
)
def test_error_payloads_map_to_exceptions(errorcode, error_class):
    payload = {
        "exception": "moodle_exception",
        "errorcode": errorcode,
        "message": "Something went wrong",
        "debuginfo": "details",
    }
    client, _ = make_client(httpx.Response(200, json=payload))

    with pytest.raises(error_class) as exc_info:
        client.call("core_webservice_get_site_info")

    assert exc_info.value.error_code == errorcode
    assert exc_info.value.debug_info == "details"


def test_http_error():
    client, _ = make_client(httpx.Response(500, text="boom"))

    with pytest.raises(MoodleAPIError, match="HTTP 500"):
        client.call("core_webservice_get_site_info")


def test_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = WebServiceClient(BASE_URL, "secret", transport=httpx.MockTransport(handler))

    with pytest.raises(MoodleAPIError, match="Request failed"):
        client.call("core_webservice_get_site_info")


def test_from_settings():
    settings = ClientSettings(url=BASE_URL, token="abc", timeout=5.0, verify_ssl=False)
    client = WebServiceClient.from_settings(settings)

    assert client.base_url == BASE_URL
    assert client.token == "abc"
    assert client.timeout == 5.0
    assert client.verify_ssl is False
