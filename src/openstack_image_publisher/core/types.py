"""Core data types for the image publisher."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..exceptions import ArtifactNotFoundError, ConfigurationError

DEFAULT_HOST = "localhost"
DEFAULT_SCHEME = "http"
DEFAULT_CATALOG_PORT = 9292
DEFAULT_IDENTITY_PORT = 5000
DEFAULT_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB

SUPPORTED_SCHEMES = ("http", "https")

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}


@dataclass(frozen=True)
class Endpoint:
    """Location of one remote service."""

    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_CATALOG_PORT

    @property
    def base_url(self) -> str:
        """Service root URL without trailing slash."""
        return f"{self.scheme}://{self.host}:{self.port}"

    def url(self, path: str) -> str:
        """Join ``path`` onto the service root."""
        return f"{self.base_url}/{path.lstrip('/')}"


@dataclass(frozen=True)
class Credentials:
    """Identity service credentials."""

    tenant_id: str
    user: str
    password: str = field(repr=False)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "Credentials | None":
        """Build credentials only when tenant, user and password are all set."""
        values = [options.get(key) for key in ("tenant_id", "user", "password")]
        if any(value is None for value in values):
            return None
        tenant_id, user, password = (str(value) for value in values)
        return cls(tenant_id=tenant_id, user=user, password=password)


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigurationError(f"Option '{key}' must be a boolean, got {value!r}")


def _as_int(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Option '{key}' must be an integer, got {value!r}"
        ) from e
    if number <= 0:
        raise ConfigurationError(f"Option '{key}' must be positive, got {value!r}")
    return number


def _first_set(options: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if options.get(key) is not None:
            return options[key]
    return None


@dataclass(frozen=True)
class PublisherConfig:
    """Immutable configuration for one publishing run."""

    identity: Endpoint = field(
        default_factory=lambda: Endpoint(port=DEFAULT_IDENTITY_PORT)
    )
    catalog: Endpoint = field(default_factory=Endpoint)
    credentials: Credentials | None = None
    overwrite: bool = False
    public: bool = False
    timeout: int = DEFAULT_TIMEOUT
    upload_timeout: int | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "PublisherConfig":
        """Build a configuration from delivery plugin options.

        Both endpoints fall back to the shared ``host``. The legacy ``port``
        option addresses the catalog; the identity service has its own
        ``nova_port``.

        Raises:
            ConfigurationError: If an option has an invalid value
        """
        options = options or {}

        scheme = str(options.get("schema") or DEFAULT_SCHEME).lower()
        if scheme not in SUPPORTED_SCHEMES:
            raise ConfigurationError(f"Unsupported schema: {scheme}")

        host = str(options.get("host") or DEFAULT_HOST)

        catalog_port = _first_set(options, "glance_port", "port")
        identity_port = options.get("nova_port")

        catalog = Endpoint(
            scheme=scheme,
            host=str(options.get("glance_host") or host),
            port=_as_int("glance_port", catalog_port)
            if catalog_port is not None
            else DEFAULT_CATALOG_PORT,
        )
        identity = Endpoint(
            scheme=scheme,
            host=str(options.get("nova_host") or host),
            port=_as_int("nova_port", identity_port)
            if identity_port is not None
            else DEFAULT_IDENTITY_PORT,
        )

        upload_timeout = options.get("upload_timeout")

        return cls(
            identity=identity,
            catalog=catalog,
            credentials=Credentials.from_options(options),
            overwrite=_as_bool("overwrite", options.get("overwrite", False)),
            public=_as_bool("public", options.get("public", False)),
            timeout=_as_int("timeout", options.get("timeout", DEFAULT_TIMEOUT)),
            upload_timeout=_as_int("upload_timeout", upload_timeout)
            if upload_timeout is not None
            else None,
            chunk_size=_as_int(
                "chunk_size", options.get("chunk_size", DEFAULT_CHUNK_SIZE)
            ),
        )


@dataclass(frozen=True)
class ApplianceInfo:
    """Appliance metadata supplied by the build pipeline."""

    name: str
    version: int | str
    release: int | str
    os_name: str
    os_version: str

    @property
    def distro_label(self) -> str:
        """Distribution label, e.g. ``Fedora 16``."""
        return f"{self.os_name.capitalize()} {self.os_version}"


@dataclass(frozen=True)
class DiskArtifact:
    """Disk image produced by an earlier pipeline stage."""

    path: Path
    size: int

    @classmethod
    def from_path(cls, path: str | Path) -> "DiskArtifact":
        """Stat the disk file.

        Raises:
            ArtifactNotFoundError: If the file does not exist
        """
        disk_path = Path(path)
        try:
            size = disk_path.stat().st_size
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"Disk image not found: {disk_path}") from e
        if not disk_path.is_file():
            raise ArtifactNotFoundError(f"Disk image is not a file: {disk_path}")
        return cls(path=disk_path, size=size)


@dataclass(frozen=True)
class ImageDescriptor:
    """Image record as returned by the catalog."""

    id: str
    name: str | None = None
    disk_format: str | None = None
    container_format: str | None = None
    is_public: bool = False
    size: int | None = None
    status: str | None = None
    checksum: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def distro(self) -> str | None:
        return self.properties.get("distro")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImageDescriptor":
        """Create a descriptor from a catalog JSON object."""
        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            disk_format=data.get("disk_format"),
            container_format=data.get("container_format"),
            is_public=bool(data.get("is_public", False)),
            size=data.get("size"),
            status=data.get("status"),
            checksum=data.get("checksum"),
            properties=dict(data.get("properties") or {}),
            raw=dict(data),
        )


@dataclass(frozen=True)
class TokenResult:
    """Outcome of a token request.

    A missing token with a status code is the degraded, unauthenticated
    outcome; transport failures raise instead.
    """

    token: str | None
    status: int

    @property
    def authenticated(self) -> bool:
        return self.token is not None


@dataclass
class RequestResult:
    """Result of HTTP request."""

    status_code: int
    headers: dict[str, str]
    data: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
