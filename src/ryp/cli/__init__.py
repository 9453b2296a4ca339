"""Command-line interface for rotate-your-phone."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ryp.cli.exit_codes import ExitCode
from ryp.cli.output import dry_run_output, error_exit, summary_output
from ryp.config import (
    ConfigError,
    OptionProfile,
    build_logging_config,
    get_config,
    load_profile,
)
from ryp.exceptions import RypError
from ryp.executor import FFmpegEngine
from ryp.introspector import FFprobeIntrospector
from ryp.logging import configure_logging
from ryp.tools import parse_quality_tier, require_tool
from ryp.workflow import PipelineProcessor, RunOptions

logger = logging.getLogger(__name__)


def _merge_options(
    profile: OptionProfile | None,
    *,
    config_quality: str,
    config_intro: Path | None,
    config_workers: int,
    intermediate_suffix: str,
    quality: str | None,
    output_dir: Path | None,
    intro: Path | None,
    thumbnail_workers: int | None,
    skip_thumbnails: bool,
    skip_rotation: bool,
    skip_banner: bool,
    keep_intermediate: bool,
    disable_hwaccel: bool,
    dry_run: bool,
) -> RunOptions:
    """Merge CLI values over profile values over configuration."""
    p = profile or OptionProfile()

    def pick(cli_value, profile_value, fallback):
        if cli_value is not None:
            return cli_value
        if profile_value is not None:
            return profile_value
        return fallback

    return RunOptions(
        quality=pick(quality, p.quality, config_quality),
        output_dir=pick(output_dir, p.output_dir, Path(".")),
        intro_path=pick(intro, p.intro, config_intro),
        skip_thumbnails=skip_thumbnails or bool(p.skip_thumbnails),
        skip_rotation=skip_rotation,
        skip_banner=skip_banner or bool(p.skip_banner),
        keep_intermediate=keep_intermediate or bool(p.keep_intermediate),
        disable_hwaccel=disable_hwaccel or bool(p.disable_hwaccel),
        dry_run=dry_run,
        thumbnail_workers=pick(thumbnail_workers, p.thumbnail_workers, config_workers),
        intermediate_suffix=intermediate_suffix,
    )


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=(
        "Outputs are written to the output directory: "
        "<name>-RotateYourPhone-<quality>.mp4, <name>-Thumb-<pct>p-<n>.png and, "
        "while processing, <name>_rotated_prores.mov."
    ),
)
@click.version_option(package_name="rotate-your-phone", prog_name="ryp")
@click.argument("input_file", type=click.Path(path_type=Path))
@click.option(
    "--skip-thumbnails", is_flag=True, default=False, help="Skip thumbnail generation."
)
@click.option(
    "--skip-rotation",
    is_flag=True,
    default=False,
    help="Reuse an existing intermediate instead of rotating again.",
)
@click.option(
    "--skip-banner", is_flag=True, default=False, help="Do not prepend the intro clip."
)
@click.option(
    "--quality",
    default=None,
    metavar="[fast|medium|high|best]",
    help="Final encode quality (default: best).",
)
@click.option(
    "--keep-intermediate",
    is_flag=True,
    default=False,
    help="Keep the ProRes intermediate after encoding.",
)
@click.option(
    "--disable-hwaccel",
    is_flag=True,
    default=False,
    help="Use software encoders even if hardware encoders are available.",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for all outputs (default: current directory).",
)
@click.option(
    "--intro",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Intro clip to prepend (default: from config).",
)
@click.option("--profile", "profile_name", default=None, help="Named option profile.")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the ffmpeg commands without running them.",
)
@click.option(
    "--thumbnail-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Parallel thumbnail extractions (default: 1).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option("--log-json", is_flag=True, default=False, help="Use JSON log format.")
def cli(
    input_file: Path,
    skip_thumbnails: bool,
    skip_rotation: bool,
    skip_banner: bool,
    quality: str | None,
    keep_intermediate: bool,
    disable_hwaccel: bool,
    output_dir: Path | None,
    intro: Path | None,
    profile_name: str | None,
    dry_run: bool,
    thumbnail_workers: int | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Rotate a video for portrait viewing, prepend the intro and encode to HEVC."""
    try:
        config = get_config()
        profile = load_profile(profile_name) if profile_name else None

        try:
            logging_config = build_logging_config(
                config.logging,
                level=log_level,
                file=log_file,
                format="json" if log_json else None,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e
        configure_logging(logging_config)
        if profile is not None:
            logger.info("Using profile '%s'", profile.name)

        options = _merge_options(
            profile,
            config_quality=config.pipeline.default_quality,
            config_intro=config.pipeline.intro,
            config_workers=config.pipeline.thumbnail_workers,
            intermediate_suffix=config.pipeline.intermediate_suffix,
            quality=quality,
            output_dir=output_dir,
            intro=intro,
            thumbnail_workers=thumbnail_workers,
            skip_thumbnails=skip_thumbnails,
            skip_rotation=skip_rotation,
            skip_banner=skip_banner,
            keep_intermediate=keep_intermediate,
            disable_hwaccel=disable_hwaccel,
            dry_run=dry_run,
        )
        parse_quality_tier(options.quality)

        ffmpeg_path = require_tool("ffmpeg", config.tools.ffmpeg)
        ffprobe_path = require_tool("ffprobe", config.tools.ffprobe)

        engine = FFmpegEngine(
            ffmpeg_path,
            timeout=config.pipeline.engine_timeout_seconds,
            dry_run=dry_run,
        )
        processor = PipelineProcessor(
            engine,
            FFprobeIntrospector(ffprobe_path),
            hardware_encoders=config.pipeline.hardware_encoders,
        )
        result = processor.run(input_file, options)
    except KeyboardInterrupt:
        error_exit(
            "Interrupted; partial output files were left in place",
            ExitCode.INTERRUPTED,
        )
    except RypError as e:
        logger.debug("Run failed", exc_info=True)
        error_exit(str(e), ExitCode.GENERAL_ERROR)

    if dry_run:
        dry_run_output(engine.planned_commands)
    summary_output(result)


def main(argv: list[str] | None = None) -> None:
    """Console entry point.

    Click usage errors exit 1 rather than click's default of 2, so every
    failure maps to the same status.
    """
    try:
        rv = cli.main(args=argv, prog_name="ryp", standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    except click.ClickException as e:
        e.show()
        sys.exit(ExitCode.GENERAL_ERROR)
    sys.exit(rv if isinstance(rv, int) else ExitCode.SUCCESS)


__all__ = ["cli", "main"]
