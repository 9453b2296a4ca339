"""External tool detection and encoder selection."""

from ryp.tools.detection import (
    HARDWARE_ENCODERS,
    detect_hardware_backend,
    find_tool,
    hardware_available,
    parse_encoder_list,
    require_tool,
)
from ryp.tools.encoders import (
    HARDWARE_BITRATES,
    SOFTWARE_CRF_PRESETS,
    VALID_TIERS,
    QualityProfile,
    RateControl,
    parse_quality_tier,
    select_quality_profile,
)

__all__ = [
    # Detection
    "HARDWARE_ENCODERS",
    "detect_hardware_backend",
    "find_tool",
    "hardware_available",
    "parse_encoder_list",
    "require_tool",
    # Encoders
    "HARDWARE_BITRATES",
    "SOFTWARE_CRF_PRESETS",
    "VALID_TIERS",
    "QualityProfile",
    "RateControl",
    "parse_quality_tier",
    "select_quality_profile",
]
