"""Upload limits of common sharing platforms."""

from __future__ import annotations

from flexigif.config.models import MIB
from flexigif.domain.models import Platform

DISCORD_MAX_FILE_SIZE = 25 * MIB

PLATFORM_LIMITS: dict[str, Platform] = {
    "discord": Platform(
        name="Discord",
        max_file_size=DISCORD_MAX_FILE_SIZE,  # 100MB with Nitro
        supported_formats=("gif", "webm", "mp4"),
    ),
    "twitter": Platform(
        name="Twitter",
        max_file_size=512 * MIB,
        supported_formats=("gif", "mp4"),
    ),
    "instagram": Platform(
        name="Instagram",
        max_file_size=100 * MIB,
        supported_formats=("gif", "mp4"),
    ),
    "facebook": Platform(
        name="Facebook",
        max_file_size=4 * 1024 * MIB,
        supported_formats=("gif", "mp4", "webm"),
    ),
}


def platform_from_name(name: str) -> Platform:
    """Look up a known platform by name, case-insensitively.

    Unknown names get a Platform with no size limit and no format list.
    """
    known = PLATFORM_LIMITS.get(name.strip().casefold())
    if known is not None:
        return known
    return Platform(name=name.strip(), max_file_size=0)
