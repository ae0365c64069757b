"""
Decoding of inbound build-request deliveries.

A build request is a UTF-8 JSON object sent with content type
``application/json``:

    {"project": "<job-name>",
     "token": "<shared-secret>",
     "parameter": [{"name": "<PARAM>", "value": "<string>"}, ...]}

Decoding never raises. The outcome is a DecodedDelivery whose status tells
the listener whether to dispatch the request or drop it.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rabbitmq_build_trigger.core.types import CONTENT_TYPE_JSON

KEY_PROJECT = "project"
KEY_TOKEN = "token"
KEY_PARAMETER = "parameter"


class DeliveryStatus(Enum):
    OK = "ok"
    WRONG_CONTENT_TYPE = "wrong_content_type"
    BAD_ENCODING = "bad_encoding"
    BAD_JSON = "bad_json"


@dataclass(frozen=True)
class BuildRequest:
    """
    A decoded build request.

    ``project`` and ``token`` are None when the field is missing or not a
    string; such a request matches no trigger. ``parameters`` is None when the
    message carries no ``parameter`` array.
    """

    project: str | None
    token: str | None
    parameters: list[Any] | None = None

    def matches(self, project_name: str | None, token: str | None) -> bool:
        if self.project is None or self.token is None:
            return False
        return self.project == project_name and self.token == token


@dataclass(frozen=True)
class DecodedDelivery:
    status: DeliveryStatus
    request: BuildRequest | None = None
    payload: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.OK


def _string_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


def decode_delivery(content_type: str | None, body: bytes) -> DecodedDelivery:
    """Turn a raw delivery into a BuildRequest, or say why it was rejected."""
    if content_type != CONTENT_TYPE_JSON:
        return DecodedDelivery(DeliveryStatus.WRONG_CONTENT_TYPE, error=f"content type {content_type!r}")

    try:
        payload = body.decode("utf-8")
    except UnicodeDecodeError as e:
        return DecodedDelivery(DeliveryStatus.BAD_ENCODING, error=str(e))

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as e:
        return DecodedDelivery(DeliveryStatus.BAD_JSON, payload=payload, error=str(e))

    if not isinstance(data, dict):
        return DecodedDelivery(
            DeliveryStatus.BAD_JSON,
            payload=payload,
            error=f"expected a JSON object, got {type(data).__name__}",
        )

    parameters = data.get(KEY_PARAMETER)
    if parameters is not None and not isinstance(parameters, list):
        return DecodedDelivery(
            DeliveryStatus.BAD_JSON,
            payload=payload,
            error=f"'{KEY_PARAMETER}' must be an array",
        )

    request = BuildRequest(
        project=_string_field(data, KEY_PROJECT),
        token=_string_field(data, KEY_TOKEN),
        parameters=parameters,
    )
    return DecodedDelivery(DeliveryStatus.OK, request=request, payload=payload)
