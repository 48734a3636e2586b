"""Collecting the recently modified source files to review."""

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from lens_reviewer.models.sources import SourceFile

logger = logging.getLogger(__name__)

# Directories never worth reviewing
SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv", "Library", "Temp", "obj", "bin"}


class GitError(RuntimeError):
    """Raised when git cannot list changed files."""

    pass


def iter_source_files(
    targets: Iterable[str | Path],
    suffixes: Iterable[str],
    recursive: bool = True,
) -> list[Path]:
    """Expand files and directories into reviewable source paths.

    Explicit file targets are kept whatever their suffix; directory contents
    are filtered by ``suffixes``. The result is sorted and de-duplicated.
    """
    wanted = {s.lower() for s in suffixes}
    files: set[Path] = set()

    for target in targets:
        p = Path(target)
        if p.is_file():
            files.add(p)
            continue
        if not p.is_dir():
            logger.warning(f"Skipping {p}: not a file or directory")
            continue
        candidates = p.rglob("*") if recursive else p.glob("*")
        for fp in candidates:
            if any(part in SKIP_DIRS for part in fp.relative_to(p).parts):
                continue
            if fp.is_file() and fp.suffix.lower() in wanted:
                files.add(fp)

    return sorted(files)


def changed_files(repo: Path, base: str = "HEAD") -> list[Path]:
    """Files modified relative to ``base`` plus untracked files.

    ``repo`` may be any directory inside a work tree; only files under it
    are listed, with names resolved against it.

    Raises:
        GitError: If ``repo`` is not a git work tree or git is unavailable
    """
    # Both commands print paths relative to ``repo``
    commands = [
        ["git", "diff", "--name-only", "--relative", "--diff-filter=ACMR", base, "--"],
        ["git", "ls-files", "--others", "--exclude-standard"],
    ]
    names: list[str] = []
    for cmd in commands:
        try:
            result = subprocess.run(
                cmd,
                cwd=repo,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"{' '.join(cmd)} failed: {e.stderr.strip()}") from e
        names.extend(line for line in result.stdout.splitlines() if line.strip())

    paths = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        path = repo / name
        if path.is_file():
            paths.append(path)
    logger.debug(f"git reports {len(paths)} changed files against {base}")
    return paths


def read_text_file(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def load_sources(paths: Iterable[Path], root: Path | None = None) -> list[SourceFile]:
    """Read ``paths`` into SourceFile objects, paths shown relative to ``root``."""
    sources = []
    for path in paths:
        display = path
        if root is not None:
            try:
                display = path.resolve().relative_to(root.resolve())
            except ValueError:
                display = path
        sources.append(SourceFile(path=display.as_posix(), content=read_text_file(path)))
    return sources
