# tenantcms/utils/payload_guard.py
from __future__ import annotations

import json

from tenantcms.core.errors import InvalidArgument
from tenantcms.core.settings import settings


def enforce_section_content_size(content: dict) -> None:
    """
    Enforces a maximum serialized JSON size (in KB) for a section's content.
    Raises InvalidArgument on overflow or on content that is not JSON serializable.
    """
    limit_kb = float(settings.MAX_SECTION_CONTENT_KB or 0)
    if limit_kb <= 0:
        return
    try:
        # compact JSON to measure true wire-size
        b = json.dumps(content, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidArgument("Content is not valid JSON", errors={"content": [str(e)]}) from e
    kb = len(b) / 1024.0
    if kb > limit_kb:
        raise InvalidArgument(
            f"Payload too large: content is {kb:.1f}KB, limit is {limit_kb:.0f}KB",
            errors={"content": ["too large"]},
        )
