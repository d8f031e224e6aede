# plugins/etsy/profile.py
"""
Etsy user profile parsing.

The Etsy v2 ``users`` endpoint answers with a result envelope:

    {
        "count": 1,
        "results": [
            {
                "user_id": 123456,
                "login_name": "shopper",
                "primary_email": "shopper@example.com",
                "creation_tsz": 1413324188,
                ...
            }
        ],
        "params": {"user_id": "__SELF__"},
        "type": "User",
        "pagination": {}
    }

Only the first result is used.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from plugins.etsy.errors import MalformedProfileError, ProfileParseError

logger = logging.getLogger(__name__)

PROVIDER = "etsy"


class EtsyProfile(BaseModel):
    """Normalized Etsy user profile handed to the verify callback."""
    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    emails: Optional[str] = None
    provider: str = PROVIDER
    raw: Optional[str] = None
    raw_json: Optional[Dict[str, Any]] = None


def parse_profile(data: Union[str, bytes, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Parse an Etsy user response into ``id``, ``username`` and ``emails``.

    Args:
        data: The response body as text, or the already decoded document

    Returns:
        Dict[str, Any]: ``id`` (from ``user_id``), ``username`` (from
        ``login_name``) and ``emails`` (from ``primary_email``)

    Raises:
        ProfileParseError: If ``data`` is text that is not valid JSON
        MalformedProfileError: If the document has no user record
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ProfileParseError(body=data) from e

    if not isinstance(data, dict):
        raise MalformedProfileError("Etsy profile response is not a JSON object")

    results = data.get("results")
    if not isinstance(results, list) or not results:
        raise MalformedProfileError("Etsy profile response contains no results")

    user = results[0]
    if not isinstance(user, dict) or user.get("user_id") is None:
        raise MalformedProfileError("Etsy profile result has no user_id")

    logger.debug(f"Parsed Etsy profile for user {user['user_id']}")
    return {
        "id": str(user["user_id"]),
        "username": user.get("login_name"),
        "emails": user.get("primary_email"),
    }
