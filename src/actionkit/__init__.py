"""actionkit - Action-based API client.

An Action describes one API call and how to decode its response; a Dispatcher
executes it. Decorating dispatchers record or stub calls without changing
call sites.

Example:
    from actionkit import RecordingDispatcher, github_dispatcher
    from actionkit.github import GetUser

    api = RecordingDispatcher(github_dispatcher(token="ghp_..."))
    user = api.invoke(GetUser("octocat"))
    assert api.recorded == (GetUser("octocat"),)
"""

from actionkit.action import Action, ResultAction, decode_or_raise, decode_result, expect_success
from actionkit.config import ClientSettings, load_config
from actionkit.decorators import RecordingDispatcher, StubDispatcher, StubTable
from actionkit.dispatcher import Dispatcher, HttpDispatcher, ResultHttpDispatcher, http_dispatcher
from actionkit.errors import (
    ActionKitError,
    ConfigValidationError,
    ConnectionError,
    ConnectionRefusedError,
    ConnectionTimeoutError,
    DecodeError,
    ErrorCode,
    ErrorContext,
    RequestFailedError,
    RequestTimeoutError,
    TransportError,
    UnhandledActionError,
    ValidationError,
)
from actionkit.github import github_dispatcher
from actionkit.http import HTTPRequest, HTTPResponse, HttpxTransport, Transport
from actionkit.observability import configure_logging, log_context
from actionkit.result import Failure, Result, Success, result_from

__version__ = "0.1.0"

__all__ = [
    # Actions
    "Action",
    "ResultAction",
    "decode_or_raise",
    "decode_result",
    "expect_success",
    # Dispatchers
    "Dispatcher",
    "HttpDispatcher",
    "ResultHttpDispatcher",
    "http_dispatcher",
    "github_dispatcher",
    "RecordingDispatcher",
    "StubDispatcher",
    "StubTable",
    # HTTP
    "HTTPRequest",
    "HTTPResponse",
    "HttpxTransport",
    "Transport",
    # Results
    "Result",
    "Success",
    "Failure",
    "result_from",
    # Config / logging
    "ClientSettings",
    "load_config",
    "configure_logging",
    "log_context",
    # Errors
    "ActionKitError",
    "ErrorCode",
    "ErrorContext",
    "TransportError",
    "ConnectionError",
    "ConnectionTimeoutError",
    "ConnectionRefusedError",
    "RequestTimeoutError",
    "RequestFailedError",
    "DecodeError",
    "ValidationError",
    "ConfigValidationError",
    "UnhandledActionError",
]
