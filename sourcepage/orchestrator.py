"""Pipeline orchestration: walk, index and render a project tree."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Sequence

from .classify import PathClassifier
from .config import COLLISION_ERROR, SourcePageConfig, check_output_paths, load_config
from .fsio import FileSystemIO
from .logging import get_logger
from .models import ClassifiedContent, FileRecord, NavigationTree, RunSummary, UnitResult
from .naming import ArtifactCollisionError, ArtifactNamer, NameAssignment
from .navigation import NavigationTreeBuilder
from .render import PygmentsHighlighter, PythonMarkdownRenderer
from .transform import ContentTransformer
from .walker import DEFAULT_PRUNED_DIRS, DirectoryWalker, resolve_root


class Orchestrator:
    """Coordinates a full generation run.

    Collaborators passed to the constructor take precedence; anything left out
    is built from the project's configuration at run time.
    """

    def __init__(
        self,
        config: SourcePageConfig | None = None,
        walker: DirectoryWalker | None = None,
        classifier: PathClassifier | None = None,
        namer: ArtifactNamer | None = None,
        transformer: ContentTransformer | None = None,
        tree_builder: NavigationTreeBuilder | None = None,
        io: FileSystemIO | None = None,
    ) -> None:
        self.config = config
        self.walker = walker
        self.classifier = classifier
        self.namer = namer
        self.transformer = transformer
        self.tree_builder = tree_builder or NavigationTreeBuilder()
        self.io = io
        self.logger = get_logger("orchestrator")

    def run(self, path: str | Path) -> RunSummary:
        """Generate every artifact for the project at ``path``."""
        return asyncio.run(self.run_async(path))

    async def run_async(self, path: str | Path) -> RunSummary:
        root = resolve_root(path)
        config = self.config or load_config(root)
        check_output_paths(config)
        io = self.io or FileSystemIO(config.max_concurrency)
        walker = self._resolve_walker(config, io)
        classifier = self.classifier or PathClassifier(config.languages)
        namer = self.namer or ArtifactNamer(config.naming.separator)
        transformer = self.transformer or ContentTransformer(
            PythonMarkdownRenderer(config.markdown_extensions),
            PygmentsHighlighter(),
        )
        output_dir = config.output.data_dir
        init_script = config.output.init_script

        self.logger.info("Starting run for %s", root)
        walked = await walker.walk(root)
        records = sorted(walked, key=lambda record: record.path)
        self.logger.debug("Walker discovered %d files", len(records))

        tree = self.tree_builder.build(records, root)
        tree_written = await self._write_init_script(io, tree, init_script, config.output.queue_name)

        assignment = self._assign_names(namer, records, root, config.naming.collisions)

        # At most max_concurrency files are held in memory at once.
        file_slots = asyncio.Semaphore(io.max_concurrency)
        results = await asyncio.gather(
            *(
                self._process_file(
                    io,
                    file_slots,
                    classifier,
                    transformer,
                    record,
                    assignment.names[record.path],
                    output_dir,
                )
                for record in records
                if record.path in assignment.names
            )
        )
        collision_results = [
            UnitResult(source=source, error=f"artifact name already taken by {owner}")
            for source, owner in assignment.collisions.items()
        ]

        summary = RunSummary(
            root=str(root),
            output_dir=str(output_dir),
            init_script=str(init_script),
            tree_written=tree_written,
            results=list(results) + collision_results,
            collisions=sorted(assignment.collisions),
        )
        self.logger.info(
            "Generated %d artifacts (%d failed) in %s",
            summary.succeeded,
            summary.failed,
            output_dir,
        )
        return summary

    def _resolve_walker(self, config: SourcePageConfig, io: FileSystemIO) -> DirectoryWalker:
        if self.walker is not None:
            return self.walker
        return DirectoryWalker(
            DEFAULT_PRUNED_DIRS | set(config.walk.prune_dirs),
            excluded_paths=(config.output.data_dir, config.output.init_script),
            follow_symlinks=config.walk.follow_symlinks,
            io=io,
        )

    async def _write_init_script(
        self, io: FileSystemIO, tree: NavigationTree, target: Path, queue_name: str
    ) -> bool:
        script = self.tree_builder.render_init_script(tree, queue_name=queue_name)
        try:
            await io.write_text(target, script)
        except OSError as exc:
            self.logger.warning("Failed to write navigation tree to %s: %s", target, exc)
            return False
        self.logger.debug("Navigation tree with %d directories written to %s", len(tree), target)
        return True

    def _assign_names(
        self,
        namer: ArtifactNamer,
        records: Sequence[FileRecord],
        root: Path,
        policy: str,
    ) -> NameAssignment:
        for record in records:
            ambiguous = namer.ambiguous_components(record.path, root)
            if ambiguous:
                self.logger.debug(
                    "%s contains the separator %r in %s",
                    record.path,
                    namer.separator,
                    ", ".join(ambiguous),
                )

        assignment = namer.assign(records, root)
        if not assignment.collisions:
            return assignment

        lines = [f"{source} -> {owner}" for source, owner in sorted(assignment.collisions.items())]
        if policy == COLLISION_ERROR:
            raise ArtifactCollisionError(
                "Artifact names collide for: " + "; ".join(lines)
            )
        for line in lines:
            self.logger.error("Artifact name collision, skipping %s", line)
        return assignment

    async def _process_file(
        self,
        io: FileSystemIO,
        file_slots: asyncio.Semaphore,
        classifier: PathClassifier,
        transformer: ContentTransformer,
        record: FileRecord,
        output_name: str,
        output_dir: Path,
    ) -> UnitResult:
        try:
            async with file_slots:
                text = await io.read_text(Path(record.path))
                content = ClassifiedContent(kind=classifier.classify(record.path), text=text)
                artifact = transformer.render_artifact(content, output_name)
                await io.write_text(output_dir / artifact.output_name, artifact.html)
        except Exception as exc:
            self.logger.warning("Failed to generate %s: %s", record.path, exc)
            return UnitResult(source=record.path, output_name=output_name, error=str(exc))
        return UnitResult(source=record.path, output_name=output_name)


def run(path: str | Path, config: Optional[SourcePageConfig] = None) -> RunSummary:
    """Convenience wrapper running a default orchestrator."""
    return Orchestrator(config=config).run(path)


__all__ = ["Orchestrator", "run"]
