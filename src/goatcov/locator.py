"""Resolve cover profile file identifiers to Go source files.

Cover profiles name files by import path plus file name
(``example.com/mod/pkg/foo.go``). The locator walks the source root once,
reads the ``module`` directive of every ``go.mod`` it finds, and indexes
each ``.go`` file under the identifier Go would give it.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from goatcov.errors import FileResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_GO_MOD = "go.mod"
_GO_SUFFIX = ".go"

# Directories the go tool never treats as part of a package path.
_SKIP_DIRS = frozenset({"vendor", "testdata", "node_modules"})

_MODULE_DIRECTIVE = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?", re.MULTILINE)


@dataclass(frozen=True)
class LocatedFile:
    """A profile identifier resolved to a file on disk."""

    identifier: str
    path: Path
    source: bytes

    def relative_path(self, root: Path) -> str:
        """Return the path relative to *root* (POSIX style), or the absolute path."""
        try:
            return self.path.relative_to(root).as_posix()
        except ValueError:
            return self.path.as_posix()


def is_excluded(identifier: str, prefixes: Iterable[str]) -> bool:
    """Return True if *identifier* starts with any of *prefixes*.

    This is a plain string prefix test; empty prefixes never match.
    """
    return any(prefix and identifier.startswith(prefix) for prefix in prefixes)


def read_module_path(go_mod: Path) -> str | None:
    """Return the module path declared in a ``go.mod`` file."""
    try:
        text = go_mod.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", go_mod, e)
        return None
    match = _MODULE_DIRECTIVE.search(text)
    return match.group(1) if match else None


class PackageLocator:
    """Identifier → source file index for one source root.

    The tree is walked once, on the first lookup, and the index is reused
    for every later lookup through the same locator.
    """

    def __init__(self, source_root: str | Path) -> None:
        self._root = Path(source_root).resolve()
        self._index: dict[str, Path] | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def locate(self, identifier: str) -> LocatedFile:
        """Resolve *identifier* and read the file's contents.

        Raises:
            FileResolutionError: If the file cannot be found or read.
        """
        path = self.index.get(identifier)
        if path is None:
            path = _absolute_fallback(identifier)
        if path is None:
            raise FileResolutionError(
                f"can't find {identifier!r} under source root {self._root}"
            )
        try:
            source = path.read_bytes()
        except OSError as e:
            raise FileResolutionError(f"can't read {path}: {e}") from e
        return LocatedFile(identifier=identifier, path=path, source=source)

    def _build_index(self) -> dict[str, Path]:
        go_files: list[Path] = []
        modules: dict[Path, str] = {}

        for dirpath, dirnames, filenames in os.walk(self._root):
            # Prune in place so skipped trees are never entered.
            dirnames[:] = sorted(
                d for d in dirnames if d not in _SKIP_DIRS and not d.startswith(".")
            )
            directory = Path(dirpath)
            for name in sorted(filenames):
                if name == _GO_MOD:
                    module = read_module_path(directory / name)
                    if module:
                        modules[directory] = module
                elif name.endswith(_GO_SUFFIX):
                    go_files.append(directory / name)

        if self._root not in modules:
            modules.update(_enclosing_module(self._root))

        index: dict[str, Path] = {}
        for fpath in go_files:
            index[self._identifier_for(fpath, modules)] = fpath

        logger.debug(
            "Indexed %d Go file(s) in %d module(s) under %s",
            len(index),
            len(modules),
            self._root,
        )
        return index

    def _identifier_for(self, fpath: Path, modules: dict[Path, str]) -> str:
        # Nearest enclosing go.mod wins; parents are ordered innermost first.
        for parent in fpath.parents:
            module = modules.get(parent)
            if module is not None:
                rel = fpath.relative_to(parent).as_posix()
                return f"{module}/{rel}"
        return fpath.relative_to(self._root).as_posix()


def _absolute_fallback(identifier: str) -> Path | None:
    """Resolve identifiers Go writes for files outside any module.

    Those are absolute paths, sometimes with a leading underscore
    (``_/home/me/src/foo.go``).
    """
    candidate = identifier[1:] if identifier.startswith("_/") else identifier
    path = Path(candidate)
    if path.is_absolute() and path.is_file():
        return path
    return None


def _enclosing_module(root: Path) -> dict[Path, str]:
    """Find the go.mod above *root* when the source root is a module subdirectory."""
    for parent in root.parents:
        go_mod = parent / _GO_MOD
        if go_mod.is_file():
            module = read_module_path(go_mod)
            return {parent: module} if module else {}
    return {}
