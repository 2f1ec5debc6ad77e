"""Disk and container format resolution."""

from dataclasses import dataclass
from enum import Enum

DISK_FORMATS = ("raw", "vhd", "vmdk", "vdi", "qcow2", "aki", "ari", "ami")
CONTAINER_FORMATS = ("ovf", "bare", "aki", "ari", "ami")

DEFAULT_FORMATS = ("raw", "bare")

PLATFORM_STAGE = "platform"


class PlatformKind(str, Enum):
    """Platform stages that may produce the disk artifact."""

    EC2 = "ec2"
    VMWARE = "vmware"
    VIRTUALBOX = "virtualbox"


SUPPORTED_PLATFORMS = tuple(PlatformKind)

_PLATFORM_FORMATS = {
    PlatformKind.EC2: ("ami", "ami"),
    PlatformKind.VMWARE: ("vmdk", "bare"),
    PlatformKind.VIRTUALBOX: ("vmdk", "bare"),
}


@dataclass(frozen=True)
class UpstreamStage:
    """Identity of the pipeline stage that produced the artifact."""

    type: str
    name: str


def _platform_of(upstream: "UpstreamStage | PlatformKind | str | None") -> PlatformKind | None:
    if upstream is None:
        return None
    if isinstance(upstream, UpstreamStage):
        if upstream.type != PLATFORM_STAGE:
            return None
        upstream = upstream.name
    if isinstance(upstream, PlatformKind):
        return upstream
    try:
        return PlatformKind(str(upstream).lower())
    except ValueError:
        return None


def resolve_formats(
    upstream: "UpstreamStage | PlatformKind | str | None" = None,
) -> tuple[str, str]:
    """Return ``(disk_format, container_format)`` for an upstream stage.

    Anything that is not a known platform stage resolves to raw/bare.

    Examples:
        >>> resolve_formats(PlatformKind.EC2)
        ('ami', 'ami')
        >>> resolve_formats(None)
        ('raw', 'bare')
    """
    platform = _platform_of(upstream)
    return _PLATFORM_FORMATS.get(platform, DEFAULT_FORMATS)
