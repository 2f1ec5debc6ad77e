"""OpenStack Image Publisher - Async uploader for Glance image catalogs."""

__version__ = "0.1.0"

from .core.types import (
    ApplianceInfo,
    Credentials,
    DiskArtifact,
    Endpoint,
    ImageDescriptor,
    PublisherConfig,
    TokenResult,
)
from .exceptions import (
    ArtifactNotFoundError,
    CatalogConnectionError,
    CatalogError,
    ConfigurationError,
    IdentityConnectionError,
    ImageDeleteError,
    ImageUploadError,
    PublisherError,
)
from .formats import PlatformKind, UpstreamStage, resolve_formats
from .publish import find_images, publish_disk_image
from .workflow import (
    ImageRegistration,
    RegistrationResult,
    RegistrationState,
    derive_image_name,
)

__all__ = [
    "publish_disk_image",
    "find_images",
    "ImageRegistration",
    "RegistrationResult",
    "RegistrationState",
    "derive_image_name",
    "resolve_formats",
    "PlatformKind",
    "UpstreamStage",
    "ApplianceInfo",
    "Credentials",
    "DiskArtifact",
    "Endpoint",
    "ImageDescriptor",
    "PublisherConfig",
    "TokenResult",
    "PublisherError",
    "ConfigurationError",
    "ArtifactNotFoundError",
    "IdentityConnectionError",
    "CatalogError",
    "CatalogConnectionError",
    "ImageDeleteError",
    "ImageUploadError",
]
