"""Integration tests for the command-line interface."""

import json
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from cytubegen import __version__
from cytubegen.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def media_file(tmp_path):
    """Create a placeholder input file."""
    file_path = tmp_path / "Episode 1.mkv"
    file_path.write_bytes(b"\x1a\x45\xdf\xa3")
    return file_path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "manifest:\n"
        "  url_prefix: https://cdn.example.com/\n"
        "logging:\n"
        "  level: error\n"
    )
    return path


def probe_ok(output):
    return Mock(returncode=0, stdout=output, stderr="")


class TestCLI:
    """Test click commands with ffprobe and ffmpeg mocked."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"], obj={})

        assert result.exit_code == 0
        assert f"cytubegen v{__version__}" in result.output

    def test_process(self, runner, config_file, media_file, sample_probe_output, tmp_path):
        output_dir = tmp_path / "out"

        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = [probe_ok(sample_probe_output), Mock(returncode=0, stderr="")]
            result = runner.invoke(
                cli,
                ["-c", str(config_file), "process", str(media_file), "-o", str(output_dir)],
                obj={},
            )

        assert result.exit_code == 0, result.output
        manifest = json.loads((output_dir / "manifest.json").read_text())
        assert manifest["sources"][0]["url"] == "https://cdn.example.com/main.mp4"

    def test_process_overrides(self, runner, config_file, media_file, sample_probe_output, tmp_path):
        output_dir = tmp_path / "out"

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = probe_ok(sample_probe_output)
            result = runner.invoke(
                cli,
                [
                    "-c", str(config_file), "process", str(media_file),
                    "-o", str(output_dir),
                    "--url-prefix", "/media/",
                    "--language", "eng",
                    "--dry-run",
                ],
                obj={},
            )

        assert result.exit_code == 0, result.output
        assert mock_run.call_count == 1
        manifest = json.loads((output_dir / "manifest.json").read_text())
        assert manifest["sources"][0]["url"] == "/media/main.mp4"
        # English opus commentary now outranks the Japanese aac track
        assert [t["url"] for t in manifest["audioTracks"]] == ["/media/audio_1_jpn.m4a"]
        assert "0:3 -> main.mp4 (copy)" in result.output

    def test_process_failure_exit_code(self, runner, config_file, media_file, tmp_path):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=1, stdout="", stderr="boom")
            result = runner.invoke(
                cli,
                ["-c", str(config_file), "process", str(media_file), "-o", str(tmp_path / "o")],
                obj={},
            )

        assert result.exit_code == 1

    def test_language_too_long(self, runner, config_file, media_file):
        result = runner.invoke(
            cli,
            ["-c", str(config_file), "process", str(media_file), "--language", "english"],
            obj={},
        )

        assert result.exit_code == 2
        assert "at most 4 characters" in result.output

    def test_probe(self, runner, config_file, media_file, sample_probe_output):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = probe_ok(sample_probe_output)
            result = runner.invoke(cli, ["-c", str(config_file), "probe", str(media_file)], obj={})

        assert result.exit_code == 0, result.output
        assert "Track 0: video h264" in result.output
        assert "0:4 -> sub_4_eng.vtt (encode webvtt)" in result.output
        assert "hdmv_pgs_subtitle" in result.output
        assert "sub_5" not in result.output

    def test_probe_manifest(self, runner, config_file, media_file, sample_probe_output):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = probe_ok(sample_probe_output)
            result = runner.invoke(
                cli, ["-c", str(config_file), "probe", str(media_file), "--manifest"], obj={}
            )

        assert result.exit_code == 0, result.output
        manifest = json.loads(result.output)
        assert manifest["textTracks"][0]["url"] == "https://cdn.example.com/sub_4_eng.vtt"
