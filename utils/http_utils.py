"""
Blocking JSON-over-HTTP helper shared by the providers
"""
from typing import Any, Dict, Optional
import json

import requests

from utils.errors import UpstreamError

DEFAULT_TIMEOUT = 8  # seconds

def fetch_json(url: str, params: Optional[Dict[str, str]] = None,
               headers: Optional[Dict[str, str]] = None,
               timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    """
    GET a URL and decode its JSON body

    Args:
        url: Endpoint to call
        params: Query-string parameters
        headers: Request headers
        timeout: Seconds before the request is abandoned

    Returns:
        The decoded JSON object ({} for an empty body)

    Raises:
        UpstreamError: non-2xx status, or a body that is not a JSON object
        requests.RequestException: network failures and timeouts
    """
    response = requests.get(url, params=params, headers=headers, timeout=timeout)
    text = response.text or ""

    if not 200 <= response.status_code < 300:
        raise UpstreamError(f"HTTP {response.status_code}", status=response.status_code, body=text)

    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except ValueError:
        raise UpstreamError("Invalid JSON from upstream", status=response.status_code, body=text)

    if not isinstance(data, dict):
        raise UpstreamError("Unexpected JSON shape from upstream", status=response.status_code, body=text)

    return data
