"""
Projection of Cloud Logging entries into JSON-ready dictionaries.

Only fields present on the source entry are emitted, so the default output
stays compact and verbose output carries no placeholder values.
"""

from typing import Any, Dict, Optional

from google.protobuf.json_format import MessageToDict

from utils.formatters import format_rfc3339, format_latency


def _get(source: Any, *keys: str) -> Any:
    """Read the first present key from a mapping or attribute from an object."""
    if source is None:
        return None
    for key in keys:
        if isinstance(source, dict):
            if key in source:
                return source[key]
        elif hasattr(source, key):
            return getattr(source, key)
    return None


def _payload(entry: Any) -> Any:
    payload = getattr(entry, "payload", None)
    if hasattr(payload, "DESCRIPTOR"):
        payload = MessageToDict(payload)
    if payload in (None, "", {}, []):
        return None
    return payload


def _resource(entry: Any) -> Dict[str, Any]:
    resource = getattr(entry, "resource", None)
    labels = _get(resource, "labels")
    return {
        "type": _get(resource, "type") or "",
        "labels": dict(labels) if labels else {},
    }


def _http_request(http_request: Any) -> Optional[Dict[str, Any]]:
    if not http_request:
        return None

    result = {
        "status": _get(http_request, "status") or 0,
        "latency": format_latency(_get(http_request, "latency")),
        "remoteIp": _get(http_request, "remoteIp", "remote_ip") or "",
    }

    method = _get(http_request, "requestMethod", "request_method")
    url = _get(http_request, "requestUrl", "request_url")
    user_agent = _get(http_request, "userAgent", "user_agent")
    if method or url or user_agent:
        result["requestMethod"] = method or ""
        result["requestUrl"] = url or ""
        result["userAgent"] = user_agent or ""

    return result


def _operation(operation: Any) -> Optional[Dict[str, Any]]:
    if not operation:
        return None
    return {
        "id": _get(operation, "id") or "",
        "producer": _get(operation, "producer") or "",
        "first": bool(_get(operation, "first")),
        "last": bool(_get(operation, "last")),
    }


def _source_location(source_location: Any) -> Optional[Dict[str, Any]]:
    if not source_location:
        return None
    line = _get(source_location, "line")
    # int64 fields arrive as strings in the JSON representation
    if isinstance(line, str) and line.lstrip("-").isdigit():
        line = int(line)
    return {
        "file": _get(source_location, "file") or "",
        "line": line or 0,
        "function": _get(source_location, "function") or "",
    }


def project_log_entry(entry: Any, verbose: bool = False) -> Dict[str, Any]:
    """
    Convert one Cloud Logging entry into its output shape.

    Args:
        entry: ``google.cloud.logging`` entry (text, struct or protobuf)
        verbose: Include insert id, labels, HTTP request, trace, span,
            operation and source location when present

    Returns:
        Dictionary keyed by the Cloud Logging JSON field names
    """
    timestamp = getattr(entry, "timestamp", None)
    result: Dict[str, Any] = {
        "logName": getattr(entry, "log_name", None) or "",
        "timestamp": format_rfc3339(timestamp) if timestamp is not None else "",
        "severity": getattr(entry, "severity", None) or "DEFAULT",
        "resource": _resource(entry),
    }

    payload = _payload(entry)
    if payload is not None:
        result["payload"] = payload

    if not verbose:
        return result

    insert_id = getattr(entry, "insert_id", None)
    if insert_id:
        result["insertId"] = insert_id

    labels = getattr(entry, "labels", None)
    if labels:
        result["labels"] = dict(labels)

    http_request = _http_request(getattr(entry, "http_request", None))
    if http_request is not None:
        result["httpRequest"] = http_request

    trace = getattr(entry, "trace", None)
    if trace:
        result["trace"] = trace

    span_id = getattr(entry, "span_id", None)
    if span_id:
        result["spanId"] = span_id

    operation = _operation(getattr(entry, "operation", None))
    if operation is not None:
        result["operation"] = operation

    source_location = _source_location(getattr(entry, "source_location", None))
    if source_location is not None:
        result["sourceLocation"] = source_location

    return result
