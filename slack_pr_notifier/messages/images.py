"""Pull inline ``<img>`` tags out of GitHub markdown into Slack image blocks.

Tags are recognised with regular expressions rather than an HTML parser, so
markup GitHub would render differently (comments, tags split across
attributes containing ``>``, unquoted attribute values) is not handled.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

DEFAULT_ALT_TEXT = "Image"

IMG_TAG_PATTERN = re.compile(r"<img\b[^>]*?/?>", re.IGNORECASE)
_SRC_PATTERN = re.compile(r"(?<![\w-])src\s*=\s*([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)
_ALT_PATTERN = re.compile(r"(?<![\w-])alt\s*=\s*([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)
_EXTRA_NEWLINES = re.compile(r"\n{3,}")


def build_image_block(image_url: str, alt_text: str = DEFAULT_ALT_TEXT) -> Dict[str, Any]:
    return {"type": "image", "image_url": image_url, "alt_text": alt_text or DEFAULT_ALT_TEXT}


def extract_images(text: str | None) -> Tuple[str, List[Dict[str, Any]]]:
    """Return *text* without its ``<img>`` tags and one image block per tag.

    Tags without a ``src`` are removed from the text but produce no block.
    """

    if not text:
        return "", []

    blocks: List[Dict[str, Any]] = []
    for match in IMG_TAG_PATTERN.finditer(text):
        tag = match.group(0)
        src = _SRC_PATTERN.search(tag)
        if src is None or not src.group(2).strip():
            continue
        alt = _ALT_PATTERN.search(tag)
        blocks.append(build_image_block(src.group(2).strip(), alt.group(2).strip() if alt else DEFAULT_ALT_TEXT))

    stripped = IMG_TAG_PATTERN.sub("", text)
    stripped = _EXTRA_NEWLINES.sub("\n\n", stripped).strip()
    return stripped, blocks
