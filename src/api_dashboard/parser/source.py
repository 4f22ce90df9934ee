"""Source-backed documentation lookup.

Reads the module source that declares a class or handler and answers
"which comment block precedes this declaration?". Source is looked up
on the local filesystem first (development checkouts), then as a
packaged resource (installed distributions that ship their ``.py``
files), or for top-level modules under the ``sys.path`` roots. A type
without reachable source simply has no descriptions.
"""

import importlib.resources
import inspect
import logging
import re
import sys
import threading
from pathlib import Path
from types import ModuleType
from typing import Any

from .comments import HASH, CommentStyle, extract, param_description

logger = logging.getLogger(__name__)


class SourceCommentStore:
    """Caches source lines per module file and resolves descriptions from them."""

    def __init__(self, source_root: str | Path = "src", style: CommentStyle = HASH):
        self.source_root = Path(source_root)
        self.style = style
        self._cache: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    # -- public queries -------------------------------------------------------

    def class_description(self, owner: Any) -> str | None:
        if not inspect.isclass(owner):
            return self._module_description(owner)
        lines = self.source_lines(owner)
        index = self._class_line(lines, owner)
        if index is None:
            return None
        return self._text(lines, index)

    def method_description(self, owner: Any, name: str) -> str | None:
        lines = self.source_lines(owner)
        index = self._find(lines, owner, rf"\bdef\s+{re.escape(name)}\s*\(")
        return None if index is None else self._text(lines, index)

    def field_description(self, owner: Any, name: str) -> str | None:
        lines = self.source_lines(owner)
        index = self._find(lines, owner, rf"^\s*{re.escape(name)}\s*[:=]")
        return None if index is None else self._text(lines, index)

    def param_description(self, owner: Any, method: str, param: str) -> str | None:
        lines = self.source_lines(owner)
        index = self._find(lines, owner, rf"\bdef\s+{re.escape(method)}\s*\(")
        if index is None:
            return None
        block = extract(lines, index, include_tags=True, style=self.style)
        return param_description(block.text if block else None, param)

    # -- source loading -------------------------------------------------------

    def source_lines(self, owner: Any) -> list[str]:
        """Return the source lines of the module declaring ``owner``, loaded once."""
        relative = relative_source_path(owner)
        if relative is None:
            return []
        cached = self._cache.get(relative)
        if cached is not None:
            return cached
        with self._lock:
            if relative not in self._cache:
                self._cache[relative] = self._load(relative)
            return self._cache[relative]

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _load(self, relative: str) -> list[str]:
        local = self.source_root / relative
        if local.is_file():
            try:
                return local.read_text(encoding="utf-8").splitlines()
            except OSError:
                logger.debug("Cannot read %s, trying package resources", local, exc_info=True)

        package, _, filename = relative.rpartition("/")
        if package:
            try:
                resource = importlib.resources.files(package.replace("/", ".")) / filename
                if resource.is_file():
                    return resource.read_text(encoding="utf-8").splitlines()
            except (ModuleNotFoundError, OSError, TypeError, ValueError):
                logger.debug("No packaged source for %s", relative, exc_info=True)
        else:
            # Top-level module: look in each import root, as the interpreter does.
            for root in sys.path:
                candidate = Path(root or ".") / relative
                if candidate.is_file():
                    try:
                        return candidate.read_text(encoding="utf-8").splitlines()
                    except OSError:
                        logger.debug("Cannot read %s", candidate, exc_info=True)

        logger.debug("Source unavailable for %s", relative)
        return []

    # -- declaration matching -------------------------------------------------

    def _find(self, lines: list[str], owner: Any, pattern: str) -> int | None:
        """Index of the first declaration matching ``pattern`` that belongs to ``owner``.

        Class owners are searched within the class body only. Module owners
        only match top-level lines.
        """
        regex = re.compile(pattern)
        if not inspect.isclass(owner):
            for i, line in enumerate(lines):
                if line[:1].isspace() or self.style.is_comment(line):
                    continue
                if regex.search(line):
                    return i
            return None

        start = self._class_line(lines, owner)
        if start is None:
            return None
        indent = _indent(lines[start])
        for i in range(start + 1, len(lines)):
            line = lines[i]
            stripped = line.strip()
            if not stripped or self.style.is_comment(line):
                continue
            if _indent(line) <= indent and not stripped.startswith((")", "]", "}")):
                return None
            if regex.search(line):
                return i
        return None

    def _class_line(self, lines: list[str], owner: type) -> int | None:
        regex = re.compile(rf"\bclass\s+{re.escape(owner.__name__)}\b")
        for i, line in enumerate(lines):
            if not self.style.is_comment(line) and regex.search(line):
                return i
        return None

    def _module_description(self, module: Any) -> str | None:
        lines = self.source_lines(module)
        # A module block is the first comment block in the file.
        for i, line in enumerate(lines):
            if not line.strip():
                continue
            if self.style.is_comment(line):
                continue
            return self._text(lines, i)
        return None

    def _text(self, lines: list[str], index: int) -> str | None:
        block = extract(lines, index, include_tags=False, style=self.style)
        return block.text if block else None


def relative_source_path(owner: Any) -> str | None:
    """``pkg/sub/module.py`` for anything declared in ``pkg.sub.module``."""
    if isinstance(owner, ModuleType):
        module_name = owner.__name__
    else:
        module_name = getattr(owner, "__module__", None)
    if not module_name or module_name in ("builtins", "__main__"):
        return None
    relative = module_name.replace(".", "/")
    if hasattr(sys.modules.get(module_name), "__path__"):
        return relative + "/__init__.py"
    return relative + ".py"


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())
