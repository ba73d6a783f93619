from collections.abc import Sequence
from pathlib import Path


def discover_declaration_files(root: Path, suffixes: Sequence[str] = (".ts",)) -> list[Path]:
    files: list[Path] = []
    for suffix in suffixes:
        for p in root.rglob(f"*{suffix}"):
            if p.is_file():
                files.append(p)
    return sorted(set(files))
