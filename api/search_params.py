"""
Extraction of Rails-style `q[...]` query parameters.
"""

from typing import Annotated, Any, Dict

from fastapi import Depends, Request

from common.exceptions import ValidationException

SEARCH_PARAM_PREFIX = "q"


def extract_search_params(request: Request) -> Dict[str, Any]:
    """
    Collect `q[<key>]=value` and `q[<key>][]=value` query parameters into a dict.

    `q[status_in][]=draft&q[status_in][]=active` becomes
    `{"status_in": ["draft", "active"]}`; a repeated scalar key keeps the last value.
    """
    params: Dict[str, Any] = {}
    opening = f"{SEARCH_PARAM_PREFIX}["
    for key, value in request.query_params.multi_items():
        if not key.startswith(opening):
            continue
        inner = key[len(opening):]
        is_list = inner.endswith("][]")
        if is_list:
            inner = inner[:-2]
        name = inner[:-1] if inner.endswith("]") else ""
        if not name or "[" in name or "]" in name:
            raise ValidationException(
                detail=f"Malformed search parameter '{key}'",
                field=key,
                value=value
            )
        if is_list:
            params.setdefault(name, [])
            if not isinstance(params[name], list):
                params[name] = [params[name]]
            params[name].append(value)
        else:
            params[name] = value
    return params


SearchParams = Annotated[Dict[str, Any], Depends(extract_search_params)]
