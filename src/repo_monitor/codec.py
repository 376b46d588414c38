"""JSON decoding of GitHub API response bodies."""

import json
from typing import Any

from .exceptions import DecodeError


class JsonCodec:
    """Decodes raw response bodies into Python values."""

    encoding = "utf-8"

    def decode(self, body: bytes | str) -> Any:
        """
        Decode a response body.

        Raises:
            DecodeError: If the body is empty or not valid JSON
        """
        try:
            text = body.decode(self.encoding) if isinstance(body, bytes) else body
            return json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(
                f"Response body is not valid JSON: {e}",
                context={"body_length": len(body)},
            ) from e
