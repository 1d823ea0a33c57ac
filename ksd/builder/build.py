"""Build Kusto source trees into management command files."""

import logging
from pathlib import Path
from typing import TextIO

from ..config import BuildConfig
from ..emitter import emit, render
from ..errors import BuildError, KsdError, StreamError
from ..models import BuildResult, Declaration
from ..parser import parse
from ..parser.declaration import WarningSink

logger = logging.getLogger(__name__)


def build_file(
    reader: TextIO,
    writer: TextIO,
    folder: str,
    on_warning: WarningSink | None = None,
) -> Declaration:
    """Parse one source stream and write its command to ``writer``."""
    declaration = parse(reader, on_warning=on_warning)
    emit(declaration, folder, writer)
    return declaration


class Builder:
    """Builds every Kusto source file under a root into a mirrored output tree."""

    def __init__(self, config: BuildConfig | None = None):
        self.config = config or BuildConfig()

    def is_source_file(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.config.extensions

    def out_root_for(self, source_root: Path) -> Path:
        return source_root / self.config.out_dir

    def build_tree(
        self,
        source_root: Path | str,
        out_root: Path | str | None = None,
    ) -> BuildResult:
        """Build a source tree.

        A file that fails to build is recorded in ``errors`` and does not stop
        the rest of the tree.
        """
        source_root = Path(source_root)
        out_root = Path(out_root) if out_root is not None else self.out_root_for(source_root)
        resolved_out = out_root.resolve()
        skip_dirs = set(self.config.skip_dirs)

        result = BuildResult(
            source_root=str(source_root),
            out_root=str(out_root),
        )

        for file_path in sorted(source_root.rglob("*")):
            rel = file_path.relative_to(source_root)

            if any(skip in rel.parent.parts for skip in skip_dirs):
                continue

            # Never read back our own output
            resolved = file_path.resolve()
            if resolved == resolved_out or resolved_out in resolved.parents:
                continue

            if not file_path.is_file():
                continue

            rel_name = rel.as_posix()
            if not self.is_source_file(file_path):
                logger.debug("skipping file due to non-matching extension: %s", rel_name)
                result.skipped.append(rel_name)
                continue

            try:
                self.build_source(
                    file_path,
                    out_root / rel,
                    rel.parent.as_posix(),
                    on_warning=lambda msg, name=rel_name: result.warnings.append(f"{name}: {msg}"),
                )
            except KsdError as e:
                logger.debug("failed to build %s: %s", rel_name, e)
                result.errors.append(BuildError(rel_name, e))
                continue

            result.built.append(rel_name)

        return result

    def build_source(
        self,
        source_file: Path,
        out_file: Path,
        folder: str,
        on_warning: WarningSink | None = None,
    ) -> Declaration:
        """Build one file. The output is written only if parsing succeeds."""
        try:
            with open(source_file, encoding="utf-8", newline="") as reader:
                declaration = parse(reader, on_warning=on_warning)
        except OSError as e:
            raise StreamError(f"opening {source_file}: {e}") from e

        command = render(declaration, folder)
        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
            with open(out_file, "w", encoding="utf-8", newline="") as writer:
                writer.write(command)
        except OSError as e:
            raise StreamError(f"writing {out_file}: {e}") from e

        logger.debug("built %s -> %s", source_file, out_file)
        return declaration
