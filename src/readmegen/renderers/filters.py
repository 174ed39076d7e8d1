"""Post-processing filters for generated README text.

Models are told not to wrap their answer in a code fence but sometimes do
anyway; these filters undo that.
"""

import re

# Opening fence with optional markdown/md tag, plus whitespace that follows it
_LEADING_FENCE_RE = re.compile(r"^```(?:markdown|md)?\s*", re.IGNORECASE)

# Closing fence with surrounding whitespace
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a wrapping code fence from generated Markdown.

    Strips a leading ```` ``` ```` / ```` ```markdown ```` / ```` ```md ````
    delimiter and a trailing ```` ``` ```` delimiter, each independently.

    Args:
        text: Generated text

    Returns:
        Text without the wrapping fence
    """
    if not text:
        return text
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    return _TRAILING_FENCE_RE.sub("", text, count=1)
