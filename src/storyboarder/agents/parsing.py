"""Normalization of raw model output into JSON."""

import json
import logging
import re
from typing import Any

from ..errors import EmptyResponseError, ResponseParseError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```json|```")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence markers and surrounding whitespace.

    Every ```` ```json ```` and ```` ``` ```` marker is dropped wherever it
    appears; the text between them is kept as is.

    >>> strip_code_fences('```json\\n{"a": 1}\\n```')
    '{"a": 1}'
    """
    return _FENCE_RE.sub("", text).strip()


def parse_model_json(text: str) -> Any:
    """Parse a model response that should contain one JSON document.

    Raises:
        EmptyResponseError: If there is no text.
        ResponseParseError: If the fence-stripped text is not valid JSON.
    """
    if not text or not text.strip():
        raise EmptyResponseError("No text generated from the AI model")

    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing AI response: {text}")
        raise ResponseParseError(f"Failed to parse AI response: {e}", raw_text=text) from e
