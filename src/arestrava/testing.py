r"""Scripted transport for exercising code built on the request
executor without a network.

The transport replays one scripted response or error per attempt and
runs one optional validator per attempt against the outgoing request.

Example:
    ```pycon
    >>> from arestrava.request import RequestExecutor
    >>> from arestrava.testing import ScriptedTransport, Validator, json_response
    >>> transport = ScriptedTransport(
    ...     responses=[json_response(200, {"hello": "test"})],
    ...     validators=[Validator(expected_method="GET", expected_url_path="/v1/path")],
    ... )
    >>> RequestExecutor(transport).get("https://mock.test/v1/path")
    {'hello': 'test'}
    >>> transport.call_count
    1

    ```
"""

from __future__ import annotations

__all__ = ["ScriptedTransport", "TransportValidationError", "Validator", "json_response"]

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Sequence


class TransportValidationError(AssertionError):
    """Raised when an outgoing request does not pass its validator."""


def json_response(status_code: int, payload: Any = None, *, content: bytes | None = None) -> httpx.Response:
    r"""Create a response with a JSON body.

    Args:
        status_code: The HTTP status code.
        payload: The object serialized as body. Ignored when ``content``
            is given.
        content: Optional raw body.

    Returns:
        The response.
    """
    if content is None:
        content = b"" if payload is None else json.dumps(payload).encode()
    return httpx.Response(
        status_code, content=content, headers={"Content-Type": "application/json"}
    )


@dataclass
class Validator:
    r"""Expectations on the request sent at one attempt.

    Empty expectations are not checked.

    Attributes:
        name: Name used in failure messages.
        expected_method: The expected HTTP method.
        expected_url_path: The expected URL path.
        expected_params: Expected query parameters (subset match).
        expected_body: The expected request body.
        body_contains: If ``True`` the body only has to contain
            ``expected_body`` instead of being equal to it.
    """

    name: str = ""
    expected_method: str = ""
    expected_url_path: str = ""
    expected_params: dict[str, str] | None = None
    expected_body: str = ""
    body_contains: bool = False

    def validate(self, request: httpx.Request) -> None:
        """Check the request against the expectations.

        Args:
            request: The outgoing request.

        Raises:
            TransportValidationError: If an expectation is not met.
        """
        if self.expected_method and request.method != self.expected_method.upper():
            self._fail(f"method {request.method!r} != {self.expected_method!r}")
        if self.expected_url_path and request.url.path != self.expected_url_path:
            self._fail(f"url path {request.url.path!r} != {self.expected_url_path!r}")
        for key, value in (self.expected_params or {}).items():
            actual = request.url.params.get(key)
            if actual != value:
                self._fail(f"query parameter {key!r} is {actual!r}, expected {value!r}")
        if self.expected_body:
            body = request.content.decode()
            if self.body_contains:
                if self.expected_body not in body:
                    self._fail(f"body {body!r} does not contain {self.expected_body!r}")
            elif body != self.expected_body:
                self._fail(f"body {body!r} != {self.expected_body!r}")

    def _fail(self, reason: str) -> None:
        msg = f"validator {self.name!r}: {reason}"
        raise TransportValidationError(msg)


class ScriptedTransport:
    r"""Transport replaying scripted outcomes, one per attempt.

    At attempt ``i`` the transport runs ``validators[i]`` (if any), then
    raises ``errors[i]`` if it is set, else returns ``responses[i]``.
    Past the end of the script it answers ``default_status_code`` with
    an empty body when one is configured.

    Args:
        responses: The scripted responses.
        errors: The scripted transport errors. ``None`` entries fall
            back to the response of the same attempt.
        validators: The per-attempt request validators.
        default_status_code: Optional status code answered past the end
            of the script.
    """

    def __init__(
        self,
        responses: Sequence[httpx.Response | None] = (),
        errors: Sequence[Exception | None] = (),
        validators: Sequence[Validator | None] = (),
        default_status_code: int | None = None,
    ) -> None:
        self._responses = list(responses)
        self._errors = list(errors)
        self._validators = list(validators)
        self._default_status_code = default_status_code
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def send(self, request: httpx.Request) -> httpx.Response:
        attempt = len(self.requests)
        self.requests.append(request)

        if attempt < len(self._validators) and self._validators[attempt] is not None:
            self._validators[attempt].validate(request)
        if attempt < len(self._errors) and self._errors[attempt] is not None:
            raise self._errors[attempt]

        response = self._responses[attempt] if attempt < len(self._responses) else None
        if response is None:
            if self._default_status_code is None:
                msg = f"no scripted outcome for attempt {attempt + 1}"
                raise TransportValidationError(msg)
            response = httpx.Response(self._default_status_code, content=b"")
        response.request = request
        return response
