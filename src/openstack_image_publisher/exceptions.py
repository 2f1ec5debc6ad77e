"""Custom exceptions for the OpenStack image publisher."""


class PublisherError(Exception):
    """Base exception for all publisher errors."""

    pass


class ConfigurationError(PublisherError):
    """Raised when a configuration option has an invalid value."""

    pass


class ArtifactNotFoundError(PublisherError, FileNotFoundError):
    """Raised when the disk artifact to upload does not exist."""

    pass


class IdentityConnectionError(PublisherError):
    """Raised when unable to reach the identity service."""

    pass


class CatalogError(PublisherError):
    """Raised when the image catalog answers with an error status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CatalogConnectionError(CatalogError):
    """Raised when unable to connect to the image catalog."""

    pass


class ImageDeleteError(CatalogError):
    """Raised when an image cannot be removed from the catalog."""

    pass


class ImageUploadError(CatalogError):
    """Raised when image upload fails."""

    pass
