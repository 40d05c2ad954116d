"""QBO fault type and fault-body parsing.

QBO reports request failures with a `Fault` document. With `Accept:
application/json` the body is JSON; older endpoints (and the XML content type)
return an `IntuitResponse` XML document instead. Both shapes carry
`Fault.Error[0].Message`.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any


class QBOFault(RuntimeError):
    """Raised by the client for any QBO response with status >= 400."""

    def __init__(self, http_status_code: int, response_body: str = "") -> None:
        super().__init__(f"HTTP {http_status_code}: {response_body}")
        self.http_status_code = http_status_code
        self.response_body = response_body


def _local(tag: str) -> str:
    # "{http://schema.intuit.com/finance/v3}Fault" -> "Fault"
    return tag.rsplit("}", 1)[-1]


def _message_from_xml(body: str) -> str | None:
    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return None

    fault = root if _local(root.tag) == "Fault" else None
    if fault is None:
        fault = next((el for el in root if _local(el.tag) == "Fault"), None)
    if fault is None:
        return None

    for error in fault:
        if _local(error.tag) != "Error":
            continue
        for child in error:
            if _local(child.tag) == "Message":
                return (child.text or "").strip() or None
    return None


def _message_from_json(body: str) -> str | None:
    try:
        raw: Any = json.loads(body)
    except ValueError:
        return None
    if not isinstance(raw, dict):
        return None

    fault = raw.get("Fault") or raw.get("fault")
    if not isinstance(fault, dict):
        return None
    errors = fault.get("Error") or fault.get("error")
    if isinstance(errors, dict):
        errors = [errors]
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None

    message = errors[0].get("Message") or errors[0].get("message")
    return str(message) if message else None


def parse_fault_message(response_body: str | None) -> str | None:
    """Return `Fault.Error.Message` from an XML or JSON fault body, or None."""

    body = (response_body or "").strip()
    if not body:
        return None
    if body.startswith("<"):
        return _message_from_xml(body)
    return _message_from_json(body)
