"""Execution of transcode plans with ffmpeg."""

import subprocess
from pathlib import Path
from typing import Optional

from cytubegen.config import ExecutionConfig, ToolsConfig
from cytubegen.errors import TranscodeFailed
from cytubegen.models.plan import StreamOperation, TranscodePlan
from cytubegen.utils.logger import get_logger

logger = get_logger(__name__)


class FFmpegExecutor:
    """Turn a TranscodePlan into a single ffmpeg invocation.

    All output files of a plan are produced by one ffmpeg process reading
    the input once. Each output file gets its own ``-map`` selections and
    per-stream codec options, followed by its path.
    """

    def __init__(self, tools: ToolsConfig, execution: Optional[ExecutionConfig] = None):
        """Initialize executor.

        Args:
            tools: External tool configuration
            execution: Execution configuration (overwrite behaviour)
        """
        execution = execution or ExecutionConfig()
        self.ffmpeg = tools.ffmpeg
        self.timeout_seconds = tools.transcode_timeout_seconds
        self.overwrite = execution.overwrite

    def _output_args(self, operations: list[StreamOperation]) -> list[str]:
        """Stream selection and codec options for one output file."""
        args: list[str] = []
        for operation in operations:
            args.extend(["-map", operation.map_spec])

        # Stream specifiers count output streams, not input indexes
        for n, operation in enumerate(operations):
            if operation.is_copy:
                args.extend([f"-c:{n}", "copy"])
            else:
                args.extend([f"-c:{n}", operation.codec])
                if operation.channels:
                    args.extend([f"-ac:{n}", str(operation.channels)])

        if any(operation.allow_experimental for operation in operations):
            args.extend(["-strict", "experimental"])

        formats = {operation.output_format for operation in operations} - {None}
        if formats:
            # Operations sharing a destination share its muxer
            args.extend(["-f", formats.pop()])

        return args

    def build_command(
        self, plan: TranscodePlan, input_file: Path, output_dir: Path
    ) -> list[str]:
        """Build the ffmpeg command line for a plan.

        Args:
            plan: Stream operations to execute
            input_file: Source media file
            output_dir: Directory the plan's destinations are relative to

        Returns:
            Command list for subprocess
        """
        cmd = [
            self.ffmpeg,
            "-hide_banner",
            "-y" if self.overwrite else "-n",
            "-strict", "-2",
            "-i", str(input_file),
        ]

        for destination, operations in plan.by_destination().items():
            cmd.extend(self._output_args(operations))
            cmd.append(str(output_dir / destination))

        return cmd

    def execute(self, plan: TranscodePlan, input_file: Path, output_dir: Path) -> None:
        """Run ffmpeg for a plan.

        Args:
            plan: Stream operations to execute
            input_file: Source media file
            output_dir: Existing directory receiving the output files

        Raises:
            TranscodeFailed: If ffmpeg exits with an error or times out
        """
        if not plan:
            logger.info("Nothing to transcode", file=str(input_file))
            return

        cmd = self.build_command(plan, input_file, output_dir)

        logger.info(
            "Transcoding",
            file=str(input_file),
            output_dir=str(output_dir),
            outputs=plan.destinations(),
        )
        logger.debug("Executing ffmpeg", file=str(input_file), command=cmd)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            logger.error(
                "ffmpeg timeout",
                file=str(input_file),
                timeout=self.timeout_seconds,
            )
            raise TranscodeFailed(str(input_file), None) from None
        except FileNotFoundError:
            logger.error("ffmpeg not found", executable=self.ffmpeg)
            raise TranscodeFailed(
                str(input_file), None, reason=f"{self.ffmpeg} not found"
            ) from None

        if result.returncode != 0:
            logger.error(
                "ffmpeg failed",
                file=str(input_file),
                returncode=result.returncode,
                stderr=result.stderr[-500:],  # Tail holds the actual error
            )
            raise TranscodeFailed(str(input_file), result.returncode, result.stderr)

        logger.info(
            "Transcode finished",
            file=str(input_file),
            outputs=plan.destinations(),
        )
