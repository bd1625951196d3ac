from typing import Any, Dict, List, Optional
from fastapi.encoders import jsonable_encoder


def success(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = jsonable_encoder(data)
    return body


def success_with_meta(data: Any, meta: Dict[str, Any], message: Optional[str] = None) -> Dict[str, Any]:
    body = success(data, message)
    body["meta"] = meta
    return body


def error(message: str, errors: Optional[List[Dict[str, str]]] = None, **extra) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    if errors:
        body["errors"] = errors
    return body
