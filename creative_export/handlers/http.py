"""Shared event parsing and response helpers for the Lambda handlers."""

import base64
import json
from typing import Any

from ..errors import (
    CreativeExportError,
    InvalidTransitionError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

STATUS_BY_ERROR = {
    ValidationError: 400,
    NotFoundError: 404,
    InvalidTransitionError: 409,
    UpstreamError: 502,
}


def parse_body(event: dict) -> dict[str, Any]:
    """Body of an SQS record or an HTTP event."""
    if "Records" in event:
        return json.loads(event["Records"][0]["body"])

    body = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def query_params(event: dict) -> dict[str, str]:
    return dict(event.get("queryStringParameters") or {})


def response(status_code: int, body: dict[str, Any]) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def error_response(error: CreativeExportError) -> dict:
    status_code = next(
        (code for cls, code in STATUS_BY_ERROR.items() if isinstance(error, cls)), 500
    )
    body: dict[str, Any] = {"error": str(error)}
    if isinstance(error, ValidationError):
        body["violations"] = error.violations
    return response(status_code, body)
