"""Documentation comment extraction.

Recovers the comment block written directly above a declaration by
scanning source lines backward from the declaration site. Two block
styles are understood:

* ``HASH``: Doxygen-style Python blocks, opened by ``##`` and continued
  by ``#`` lines::

      ## Say hello.
      #  @param name who to greet
      @router.get("/hello")
      def hello(name: str = "World") -> str: ...

* ``JAVADOC``: ``/** ... */`` blocks.
"""

import re
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from .base import CommentBlock

HTML_TAG = re.compile(r"<[^>]+>")
TAG_LINE = re.compile(r"^@(\w+)\s*(.*)$")
PARAM_TAG = r"@param\s+{name}\s+(.*)"


class CommentStyle(BaseModel):
    """Markers delimiting a documentation block. All fields are regexes."""

    model_config = ConfigDict(frozen=True)

    opener: str
    closer: str
    continuation: str | None = None  # lines inside a block must match, if set
    strip: str
    annotation: str = r"^@"
    tag: str = "@"
    comment_prefixes: tuple[str, ...] = ()

    def is_comment(self, line: str) -> bool:
        return line.strip().startswith(self.comment_prefixes)


HASH = CommentStyle(opener=r"^##", closer=r"^#", continuation=r"^#", strip=r"^#+", comment_prefixes=("#",))
JAVADOC = CommentStyle(
    opener=r"^/\*\*",
    closer=r"\*/$",
    strip=r"^/\*+|\*+/$|\*",
    comment_prefixes=("//", "*", "/*"),
)


def extract(
    lines: Sequence[str],
    index: int,
    include_tags: bool = False,
    style: CommentStyle = HASH,
) -> CommentBlock | None:
    """Return the documentation block that precedes ``lines[index]``.

    Annotation lines between the block and the declaration are skipped,
    including annotations wrapped over several lines.
    Returns None when the nearest non-annotation line is blank, is not a
    block closer, or the block is never opened.
    """
    i = index - 1
    while i >= 0:
        line = lines[i].strip()
        if re.match(style.annotation, line):
            i -= 1
            continue
        if line and not re.search(style.closer, line):
            start = _decorator_start(lines, i, style)
            if start is not None:
                i = start - 1
                continue
        if not line or not re.search(style.closer, line):
            return None
        text = _collect(lines, i, include_tags, style)
        if text is None:
            return None
        return CommentBlock(text=text, tags=parse_tags(text) if include_tags else {})
    return None


def _decorator_start(lines: Sequence[str], end: int, style: CommentStyle) -> int | None:
    """First line of a multi-line annotation whose bracket closes on ``lines[end]``."""
    depth = 0
    for j in range(end, -1, -1):
        raw = lines[j].strip()
        depth += sum(raw.count(c) for c in ")]}") - sum(raw.count(c) for c in "([{")
        if depth <= 0:
            return j if j < end and re.match(style.annotation, raw) else None
    return None


def _collect(lines: Sequence[str], end: int, include_tags: bool, style: CommentStyle) -> str | None:
    collected: list[str] = []
    for j in range(end, -1, -1):
        raw = lines[j].strip()
        if style.continuation and not re.match(style.continuation, raw):
            return None
        is_start = re.match(style.opener, raw) is not None
        clean = HTML_TAG.sub("", re.sub(style.strip, "", raw).strip())

        if not include_tags and clean.startswith(style.tag):
            if is_start:
                return "\n".join(collected)
            continue

        if clean:
            collected.insert(0, clean)
        if is_start:
            return "\n".join(collected)
    return None


def parse_tags(text: str) -> dict[str, str]:
    """Map tag names to their text; ``@param`` tags are keyed by parameter name."""
    tags: dict[str, str] = {}
    for line in text.splitlines():
        match = TAG_LINE.match(line.strip())
        if not match:
            continue
        name, rest = match.groups()
        if name == "param":
            param, _, desc = rest.partition(" ")
            if param:
                tags[param] = desc.strip()
        else:
            tags[name] = rest.strip()
    return tags


def param_description(text: str | None, name: str) -> str | None:
    """Find the ``@param <name> <text>`` tag for ``name`` in a retained block."""
    if not text:
        return None
    match = re.search(PARAM_TAG.format(name=re.escape(name)), text)
    return match.group(1).strip() if match else None


def clean_description(desc: str | None, default: str = "") -> str:
    """Flatten a description so it fits into one Markdown table cell."""
    if desc is None:
        return default
    return " ".join(desc.splitlines()).replace("|", "/")
