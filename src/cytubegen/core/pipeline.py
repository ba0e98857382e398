"""Processing pipeline orchestrator."""

import time
from pathlib import Path
from typing import Optional

from cytubegen.config import Config
from cytubegen.core.executor import FFmpegExecutor
from cytubegen.core.planner import PlanBuilder
from cytubegen.core.prober import Prober
from cytubegen.errors import CytubeGenError, TranscodeFailed
from cytubegen.models.manifest import CytubeVideo
from cytubegen.models.result import ProcessResult
from cytubegen.utils.logger import get_logger

logger = get_logger(__name__)


class ProcessingPipeline:
    """Orchestrates probe, planning, manifest writing and transcoding of one file."""

    def __init__(self, config: Config):
        """Initialize the pipeline with configuration.

        Args:
            config: Application configuration
        """
        self.config = config
        self.prober = Prober(config.tools)
        self.planner = PlanBuilder(config)
        self.executor = FFmpegExecutor(config.tools, config.execution)

    def write_manifest(self, manifest: CytubeVideo, output_dir: Path) -> Path:
        """Serialize the manifest next to the output files."""
        manifest_path = output_dir / self.config.execution.manifest_name
        manifest_path.write_text(manifest.to_json(), encoding="utf-8")
        logger.debug("Manifest written", path=str(manifest_path))
        return manifest_path

    def process(self, file_path: Path, output_dir: Optional[Path] = None) -> ProcessResult:
        """Process a single file through the complete pipeline.

        Pipeline steps:
        1. Probe (ffprobe, parse)
        2. Plan (copy/encode decisions, manifest entries)
        3. Manifest (written to the output directory)
        4. Execution (ffmpeg), skipped on dry run

        Args:
            file_path: Path to the file to process
            output_dir: Directory for output files (defaults to a directory
                named after the input file, next to it)

        Returns:
            ProcessResult with status and details
        """
        start_time = time.time()
        if output_dir is None:
            output_dir = file_path.parent / file_path.stem

        logger.info("Processing file", file=str(file_path), output_dir=str(output_dir))

        try:
            # Step 1: Probe
            probe = self.prober.probe(file_path)

            # Step 2: Plan
            plan, manifest = self.planner.build(probe, file_path)

            # Step 3: Manifest
            output_dir.mkdir(parents=True, exist_ok=True)
            manifest_path = self.write_manifest(manifest, output_dir)

            if self.config.execution.dry_run:
                logger.info(
                    "DRY RUN: Would transcode",
                    file=str(file_path),
                    command=self.executor.build_command(plan, file_path, output_dir),
                )
                return ProcessResult(
                    status="dry_run",
                    file_path=file_path,
                    output_dir=output_dir,
                    manifest_path=manifest_path,
                    plan=plan,
                    manifest=manifest,
                )

            # Step 4: Execution
            try:
                self.executor.execute(plan, file_path, output_dir)
            except TranscodeFailed as e:
                return ProcessResult(
                    status="failed",
                    file_path=file_path,
                    output_dir=output_dir,
                    manifest_path=manifest_path,
                    plan=plan,
                    manifest=manifest,
                    reason="transcode_failed",
                    error=e.message,
                )

            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                "File processed successfully",
                file=str(file_path),
                outputs=plan.destinations(),
                manifest=str(manifest_path),
                duration_ms=duration_ms,
            )
            return ProcessResult(
                status="success",
                file_path=file_path,
                output_dir=output_dir,
                manifest_path=manifest_path,
                plan=plan,
                manifest=manifest,
            )

        except CytubeGenError as e:
            logger.error("Processing failed", file=str(file_path), error=e.message)
            return ProcessResult(
                status="error", file_path=file_path, output_dir=output_dir, error=e.message
            )

        except OSError as e:
            logger.exception("Pipeline error", file=str(file_path), error=str(e))
            return ProcessResult(
                status="error", file_path=file_path, output_dir=output_dir, error=str(e)
            )
