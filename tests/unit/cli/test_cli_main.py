"""Unit tests for the ryp command line."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ryp.cli import _merge_options, cli, main
from ryp.cli.exit_codes import ExitCode
from ryp.config import OptionProfile, RypConfig
from ryp.config.models import PipelineConfig
from ryp.exceptions import ToolNotAvailableError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config(intro_video):
    return RypConfig(pipeline=PipelineConfig(intro=intro_video))


@pytest.fixture
def patched(config, stub_introspector, recording_engine):
    """Patch config, logging and tool lookup; route runs to the fakes."""
    recording_engine.planned_commands = [["ffmpeg", "-i", "clip.mov", "out.mp4"]]
    with (
        patch("ryp.cli.get_config", return_value=config),
        patch("ryp.cli.configure_logging"),
        patch("ryp.cli.require_tool", side_effect=lambda name, path: Path(name)),
        patch("ryp.cli.FFmpegEngine", return_value=recording_engine) as engine_cls,
        patch("ryp.cli.FFprobeIntrospector", return_value=stub_introspector),
    ):
        yield engine_cls


class TestCli:
    """Tests for the click command."""

    def test_success(self, runner, patched, recording_engine, source_video, output_dir):
        result = runner.invoke(
            cli, [str(source_video), "-o", str(output_dir), "--quality", "fast"]
        )
        assert result.exit_code == 0, result.output
        assert "clip-RotateYourPhone-fast.mp4" in result.output
        assert "Thumbnails: 60 written" in result.output
        assert recording_engine.for_stage("final_encode")

    def test_default_quality_from_config(
        self, runner, patched, source_video, output_dir
    ):
        result = runner.invoke(
            cli, [str(source_video), "-o", str(output_dir), "--skip-thumbnails"]
        )
        assert result.exit_code == 0, result.output
        assert "clip-RotateYourPhone-best.mp4" in result.output

    def test_invalid_quality(self, runner, patched, recording_engine, source_video):
        result = runner.invoke(cli, [str(source_video), "--quality", "ultra"])
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Invalid quality level 'ultra'" in result.output
        assert recording_engine.invocations == []
        patched.assert_not_called()

    def test_missing_input(self, runner, patched, temp_dir):
        result = runner.invoke(cli, [str(temp_dir / "missing.mov")])
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Error: Input file not found" in result.output

    def test_skip_rotation_without_intermediate(
        self, runner, patched, source_video, output_dir
    ):
        result = runner.invoke(
            cli, [str(source_video), "-o", str(output_dir), "--skip-rotation"]
        )
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Cannot skip intermediate stage" in result.output

    def test_missing_tool(self, runner, config, source_video):
        with (
            patch("ryp.cli.get_config", return_value=config),
            patch("ryp.cli.configure_logging"),
            patch(
                "ryp.cli.require_tool", side_effect=ToolNotAvailableError("ffmpeg")
            ),
        ):
            result = runner.invoke(cli, [str(source_video)])
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Required tool not available: ffmpeg" in result.output

    def test_dry_run(self, runner, patched, source_video, output_dir):
        result = runner.invoke(
            cli, [str(source_video), "-o", str(output_dir), "--dry-run"]
        )
        assert result.exit_code == 0, result.output
        assert "Dry run: 1 ffmpeg command(s) planned" in result.output
        assert patched.call_args.kwargs["dry_run"] is True

    def test_interrupted(self, runner, patched, source_video):
        with patch(
            "ryp.cli.PipelineProcessor.run", side_effect=KeyboardInterrupt
        ):
            result = runner.invoke(cli, [str(source_video)])
        assert result.exit_code == ExitCode.INTERRUPTED
        assert "Interrupted" in result.output

    def test_profile_applied(self, runner, patched, source_video, output_dir):
        profile = OptionProfile(name="draft", quality="medium", skip_thumbnails=True)
        with patch("ryp.cli.load_profile", return_value=profile) as load:
            result = runner.invoke(
                cli, [str(source_video), "-o", str(output_dir), "--profile", "draft"]
            )
        assert result.exit_code == 0, result.output
        load.assert_called_once_with("draft")
        assert "clip-RotateYourPhone-medium.mp4" in result.output
        assert "Thumbnails" not in result.output

    def test_rotation_note_is_printed(
        self,
        runner,
        patched,
        stub_introspector,
        props_factory,
        source_video,
        output_dir,
    ):
        stub_introspector.register("clip.mov", props_factory(rotation_tag=45))
        result = runner.invoke(
            cli, [str(source_video), "-o", str(output_dir), "--skip-thumbnails"]
        )
        assert result.exit_code == 0, result.output
        assert "Warning: Unsupported rotation detected (45 degrees)" in result.output


class TestMergeOptions:
    """Tests for CLI over profile over config precedence."""

    def _merge(self, profile=None, **cli_values):
        values = dict(
            quality=None,
            output_dir=None,
            intro=None,
            thumbnail_workers=None,
            skip_thumbnails=False,
            skip_rotation=False,
            skip_banner=False,
            keep_intermediate=False,
            disable_hwaccel=False,
            dry_run=False,
        )
        values.update(cli_values)
        return _merge_options(
            profile,
            config_quality="best",
            config_intro=Path("/config/intro.mp4"),
            config_workers=2,
            intermediate_suffix="_rotated_prores.mov",
            **values,
        )

    def test_config_defaults(self):
        options = self._merge()
        assert options.quality == "best"
        assert options.intro_path == Path("/config/intro.mp4")
        assert options.thumbnail_workers == 2
        assert options.output_dir == Path(".")

    def test_profile_over_config(self):
        profile = OptionProfile(quality="fast", skip_banner=True, thumbnail_workers=8)
        options = self._merge(profile)
        assert options.quality == "fast"
        assert options.skip_banner
        assert options.thumbnail_workers == 8

    def test_cli_over_profile(self):
        profile = OptionProfile(quality="fast", intro=Path("/profile/intro.mp4"))
        options = self._merge(
            profile,
            quality="high",
            intro=Path("/cli/intro.mp4"),
            keep_intermediate=True,
        )
        assert options.quality == "high"
        assert options.intro_path == Path("/cli/intro.mp4")
        assert options.keep_intermediate


class TestMain:
    """Tests for the console entry point exit statuses."""

    def test_usage_error_exits_one(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--thumbnail-workers", "0", "clip.mov"])
        assert exc_info.value.code == ExitCode.GENERAL_ERROR
        assert "thumbnail-workers" in capsys.readouterr().err

    def test_missing_argument_exits_one(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == ExitCode.GENERAL_ERROR

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "--skip-banner" in capsys.readouterr().out
