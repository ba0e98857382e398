"""Unit tests for the ffmpeg executor."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from cytubegen.config import ExecutionConfig, ToolsConfig
from cytubegen.core.executor import FFmpegExecutor
from cytubegen.errors import TranscodeFailed
from cytubegen.models.plan import StreamOperation, TranscodePlan
from cytubegen.models.track import TrackKind


@pytest.fixture
def executor():
    """Create FFmpegExecutor instance."""
    return FFmpegExecutor(ToolsConfig(ffmpeg="/usr/bin/ffmpeg", transcode_timeout_seconds=60))


@pytest.fixture
def plan():
    """A plan with a main file, an extra audio file and a subtitle."""
    return TranscodePlan([
        StreamOperation.copy(0, TrackKind.VIDEO, "main.mp4"),
        StreamOperation.encode(1, TrackKind.AUDIO, "main.mp4", "aac", channels=2),
        StreamOperation.copy(3, TrackKind.AUDIO, "audio_3_eng.ogg"),
        StreamOperation.encode(4, TrackKind.SUBTITLE, "sub_4_eng.vtt", "webvtt"),
    ])


class TestBuildCommand:
    """Test ffmpeg command building."""

    def test_full_command(self, executor, plan):
        input_file = Path("/media/in.mkv")
        output_dir = Path("/out")

        cmd = executor.build_command(plan, input_file, output_dir)

        assert cmd == [
            "/usr/bin/ffmpeg", "-hide_banner", "-n", "-strict", "-2",
            "-i", "/media/in.mkv",
            "-map", "0:0", "-map", "0:1",
            "-c:0", "copy", "-c:1", "aac", "-ac:1", "2",
            "/out/main.mp4",
            "-map", "0:3", "-c:0", "copy",
            "/out/audio_3_eng.ogg",
            "-map", "0:4", "-c:0", "webvtt",
            "/out/sub_4_eng.vtt",
        ]

    def test_overwrite(self, plan):
        executor = FFmpegExecutor(ToolsConfig(), ExecutionConfig(overwrite=True))

        cmd = executor.build_command(plan, Path("in.mkv"), Path("out"))

        assert cmd[:3] == ["ffmpeg", "-hide_banner", "-y"]

    def test_experimental_flag_scoped_to_output(self, executor):
        plan = TranscodePlan([
            StreamOperation.copy(0, TrackKind.VIDEO, "main.mp4"),
            StreamOperation.copy(1, TrackKind.AUDIO, "main.mp4", allow_experimental=True),
            StreamOperation.copy(2, TrackKind.AUDIO, "audio_2_eng.ogg"),
        ])

        cmd = executor.build_command(plan, Path("in.mkv"), Path("out"))

        main_end = cmd.index(str(Path("out") / "main.mp4"))
        assert cmd[main_end - 2:main_end] == ["-strict", "experimental"]
        assert cmd.count("experimental") == 1

    def test_mp3_alternate_forces_mp4_muxer(self, executor):
        """An .m4a holding MP3 must be written by the mp4 muxer, not ipod."""
        plan = TranscodePlan([
            StreamOperation.copy(0, TrackKind.VIDEO, "main.mp4"),
            StreamOperation.copy(1, TrackKind.AUDIO, "main.mp4"),
            StreamOperation.copy(
                2, TrackKind.AUDIO, "audio_2_ita.m4a", output_format="mp4"
            ),
        ])

        cmd = executor.build_command(plan, Path("in.mkv"), Path("out"))

        main_end = cmd.index(str(Path("out") / "main.mp4"))
        assert "-f" not in cmd[:main_end]
        assert cmd[main_end + 1:] == [
            "-map", "0:2", "-c:0", "copy", "-f", "mp4",
            str(Path("out") / "audio_2_ita.m4a"),
        ]


class TestExecute:
    """Test ffmpeg execution."""

    def test_success(self, executor, plan, tmp_path):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stderr="")

            executor.execute(plan, tmp_path / "in.mkv", tmp_path)

        args, kwargs = mock_run.call_args
        assert args[0][0] == "/usr/bin/ffmpeg"
        assert kwargs["timeout"] == 60

    def test_empty_plan_skips_ffmpeg(self, executor, tmp_path):
        with patch("subprocess.run") as mock_run:
            executor.execute(TranscodePlan(), tmp_path / "in.mkv", tmp_path)

        mock_run.assert_not_called()

    def test_failure(self, executor, plan, tmp_path):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=1, stderr="Unknown encoder 'libfoo'")

            with pytest.raises(TranscodeFailed) as exc_info:
                executor.execute(plan, tmp_path / "in.mkv", tmp_path)

        assert exc_info.value.returncode == 1
        assert "libfoo" in exc_info.value.stderr

    def test_timeout(self, executor, plan, tmp_path):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ffmpeg", 60)):
            with pytest.raises(TranscodeFailed, match="timed out"):
                executor.execute(plan, tmp_path / "in.mkv", tmp_path)

    def test_ffmpeg_not_installed(self, executor, plan, tmp_path):
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(TranscodeFailed, match="not found"):
                executor.execute(plan, tmp_path / "in.mkv", tmp_path)
