from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from markdown_it import MarkdownIt
from sulguk import transform_html

from .layout import HAN_SUFFIX, LATIN_SUFFIX_FULL

HELP_TEXT = f"""\
**{LATIN_SUFFIX_FULL} / {HAN_SUFFIX}**

Type `@{{username}} <amount>` in any chat and pick the sticker.

- amounts are whole numbers, e.g. `5000` or `-15`
- supported range is 1 to 99999999 either way
- you can also just send me a number here
"""


_BULLET_RE = re.compile("(?m)^(\\s*)•")


def _clean_entity(entity: Any) -> Dict[str, Any]:
    cleaned = dict(entity)
    if not isinstance(cleaned.get("language", ""), str):
        del cleaned["language"]
    return cleaned


def render_markdown(md: str) -> Tuple[str, List[Dict[str, Any]]]:
    html = MarkdownIt("commonmark", {"html": False}).render(md or "")
    rendered = transform_html(html)

    # help bullets are sent as plain dashes
    text = _BULLET_RE.sub(r"\1-", rendered.text)
    return text, [_clean_entity(entity) for entity in rendered.entities]


def help_message(username: str | None) -> Tuple[str, List[Dict[str, Any]]]:
    return render_markdown(HELP_TEXT.format(username=username or "bot"))
