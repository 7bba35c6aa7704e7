"""HTTP value types and transports.

Example:
    >>> from actionkit.http import HttpxTransport, HTTPRequest
    >>> with HttpxTransport() as transport:
    ...     response = transport.execute(HTTPRequest("GET", "https://api.github.com/users/octocat"))
"""

from actionkit.http.models import HTTPRequest, HTTPResponse
from actionkit.http.transport import HttpxTransport, Transport

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HttpxTransport",
    "Transport",
]
