"""
Standard library import resolution.

Packages are described by Go declaration files under semantics/stdlib/,
one per import path with "/" spelled "_" (net/http -> net_http.go). They
are parsed with the same grammar and collected with the same pass as user
code, so an imported `func Open(name string) (*File, error)` types exactly
like a local one.

Architecture:
- StdlibImporter: loads, collects and caches packages per instance
- known_paths(): import paths with a shipped declaration file
"""
from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional

from gostub.internals.parser import parse_to_ast
from gostub.internals.report import Reporter
from gostub.semantics.symbols import Package

STUB_DIR = Path(__file__).parent / "stdlib"


def _stub_file(stub_dir: Path, path: str) -> Path:
    return stub_dir / (path.replace("/", "_") + ".go")


class StdlibImporter:
    """Resolve import paths to packages declared by shipped stub files."""

    def __init__(self, stub_dir: Optional[Path] = None) -> None:
        self.stub_dir = Path(stub_dir) if stub_dir is not None else STUB_DIR
        self._cache: Dict[str, Optional[Package]] = {}
        # Diagnostics from loading stub files; empty unless a stub is broken.
        self.reporter = Reporter("", "<stdlib>")

    def import_package(self, path: str) -> Optional[Package]:
        if path in self._cache:
            return self._cache[path]

        stub = _stub_file(self.stub_dir, path)
        if not stub.is_file():
            self._cache[path] = None
            return None

        from gostub.semantics.semantic_analyzer import SemanticAnalyzer

        program, _ = parse_to_ast(stub.read_text(encoding="utf-8"))
        analyzer = SemanticAnalyzer(self.reporter, importer=self)
        # Placeholder entry so import cycles between stubs terminate.
        self._cache[path] = None
        pkg = analyzer.declare(program, path)
        self._cache[path] = pkg
        return pkg

    def known_paths(self) -> List[str]:
        return sorted(p.stem.replace("_", "/") for p in self.stub_dir.glob("*.go"))
