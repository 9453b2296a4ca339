"""Option profile management.

Profiles store named defaults for the CLI switches (for example a "draft"
profile with fast quality and no thumbnails) and are applied with
--profile. They live in ~/.ryp/profiles/<name>.yaml.
"""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ryp.config.models import DEFAULT_CONFIG_DIR
from ryp.exceptions import ValidationError
from ryp.tools.encoders import VALID_TIERS

_PROFILE_NAME = re.compile(r"^[a-zA-Z0-9_-]+$")


class ProfileError(ValidationError):
    """Error loading or validating a profile."""


class ProfileNotFoundError(ProfileError):
    """Profile does not exist."""


class OptionProfile(BaseModel):
    """Defaults for CLI switches. Unset fields leave the option untouched."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    description: str | None = None
    quality: str | None = None
    skip_thumbnails: bool | None = None
    skip_banner: bool | None = None
    keep_intermediate: bool | None = None
    disable_hwaccel: bool | None = None
    output_dir: Path | None = None
    intro: Path | None = None
    thumbnail_workers: int | None = Field(default=None, ge=1)

    @field_validator("quality")
    @classmethod
    def validate_quality(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if v not in VALID_TIERS:
            raise ValueError(
                f"quality must be one of {', '.join(VALID_TIERS)}, got '{v}'"
            )
        return v

    @field_validator("output_dir", "intro")
    @classmethod
    def expand_user(cls, v: Path | None) -> Path | None:
        return v.expanduser() if v is not None else None


def get_profiles_directory() -> Path:
    """Get the profiles directory path (~/.ryp/profiles/)."""
    return DEFAULT_CONFIG_DIR / "profiles"


def list_profiles(profiles_dir: Path | None = None) -> list[str]:
    """List available profile names (without .yaml extension)."""
    directory = profiles_dir or get_profiles_directory()
    if not directory.exists():
        return []
    return sorted(
        p.stem
        for p in directory.glob("*.yaml")
        if p.is_file() and not p.name.startswith(".")
    )


def load_profile(name: str, profiles_dir: Path | None = None) -> OptionProfile:
    """Load a profile by name.

    Args:
        name: Profile name (without .yaml extension).
        profiles_dir: Directory to look in. None uses ~/.ryp/profiles.

    Returns:
        Validated OptionProfile.

    Raises:
        ProfileNotFoundError: If the profile doesn't exist.
        ProfileError: If the profile is invalid.
    """
    if not _PROFILE_NAME.match(name):
        raise ProfileError(f"Profile name must be alphanumeric (with - or _): {name}")

    directory = profiles_dir or get_profiles_directory()
    profile_path = directory / f"{name}.yaml"
    if not profile_path.exists():
        available = list_profiles(directory)
        raise ProfileNotFoundError(
            f"Profile not found: {name}. Available profiles: "
            + (", ".join(available) if available else f"none in {directory}")
        )

    try:
        with open(profile_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid YAML in profile {name}: {e}") from e

    if not isinstance(data, dict):
        raise ProfileError(f"Profile {name} must be a mapping of option names")

    try:
        profile = OptionProfile.model_validate(data)
    except PydanticValidationError as e:
        raise ProfileError(f"Invalid profile {name}: {e}") from e

    if profile.name is None:
        profile = profile.model_copy(update={"name": name})
    return profile
