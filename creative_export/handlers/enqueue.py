"""AWS Lambda handler that queues large exports for the export worker."""

import json

import boto3

from ..config import EXPORT_QUEUE_URL
from .http import parse_body, response

_sqs = None


def _client():
    global _sqs
    if _sqs is None:
        _sqs = boto3.client("sqs")
    return _sqs


def handler(event, context):
    """
    HTTP to SQS proxy.

    Checks that the export request names a template and at least one size,
    then forwards it unchanged; the export handler consumes the SQS record.
    """
    try:
        body = parse_body(event)
    except json.JSONDecodeError:
        return response(400, {"error": "Invalid JSON body"})

    if not body.get("templatePath") or not body.get("sizes"):
        return response(400, {"error": "Missing 'templatePath' or 'sizes' field"})

    result = _client().send_message(QueueUrl=EXPORT_QUEUE_URL, MessageBody=json.dumps(body))
    print(f"Queued export of {body['templatePath']} ({len(body['sizes'])} sizes)", flush=True)

    return response(202, {"status": "queued", "messageId": result["MessageId"]})
