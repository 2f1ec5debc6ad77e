"""Image catalog operations."""

import asyncio
import logging
from typing import AsyncIterator

import aiofiles
import aiohttp

from ..core.log import trace
from ..core.session import (
    auth_headers,
    make_request,
    parse_json_response,
    request_timeout,
)
from ..core.types import DiskArtifact, ImageDescriptor, PublisherConfig
from ..exceptions import (
    CatalogConnectionError,
    CatalogError,
    ImageDeleteError,
    ImageUploadError,
)

logger = logging.getLogger(__name__)

IMAGES_PATH = "/v1/images"


def image_url(config: PublisherConfig, image_id: str | None = None) -> str:
    """Build the catalog URL for the image collection or one image."""
    if image_id is None:
        return config.catalog.url(IMAGES_PATH)
    return config.catalog.url(f"{IMAGES_PATH}/{image_id}")


def build_image_headers(
    artifact: DiskArtifact,
    name: str,
    disk_format: str,
    container_format: str,
    is_public: bool,
    distro: str,
    token: str | None = None,
) -> dict[str, str]:
    """Build upload headers carrying the image metadata."""
    headers = {
        "Content-Type": "application/octet-stream",
        "Content-Length": str(artifact.size),
        "x-image-meta-size": str(artifact.size),
        "x-image-meta-name": name,
        "x-image-meta-disk-format": disk_format,
        "x-image-meta-container-format": container_format,
        "x-image-meta-is-public": "true" if is_public else "false",
        "x-image-meta-property-distro": distro,
    }
    headers.update(auth_headers(token))
    return headers


async def _read_chunks(disk, chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        chunk = await disk.read(chunk_size)
        if not chunk:
            break
        yield chunk


async def list_images(
    session: aiohttp.ClientSession,
    config: PublisherConfig,
    name: str | None = None,
    token: str | None = None,
) -> list[ImageDescriptor]:
    """List images, optionally filtered by exact name.

    Args:
        session: Client session
        config: Publisher configuration
        name: Name filter; all images are returned when omitted
        token: Optional access token

    Returns:
        Descriptors from the response ``images`` array

    Raises:
        CatalogConnectionError: If the catalog cannot be reached
        CatalogError: If the catalog returns an error status
    """
    params = {"name": name} if name else None
    url = image_url(config)
    trace(logger, "Listing images with params = %s...", params or {})

    try:
        result = await make_request(
            session,
            "GET",
            url,
            headers=auth_headers(token),
            params=params,
            timeout=request_timeout(config),
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise CatalogConnectionError(f"Failed to list images: {e}") from e

    if not result.ok:
        raise CatalogError(
            f"Failed to list images: HTTP {result.status_code}",
            status=result.status_code,
        )

    body = parse_json_response(result.data.decode("utf-8", errors="replace"))
    if not isinstance(body, dict) or not isinstance(body.get("images"), list):
        raise CatalogError(
            "Invalid image list response", status=result.status_code
        )

    trace(logger, "Listing done.")
    return [ImageDescriptor.from_dict(image) for image in body["images"]]


async def delete_image(
    session: aiohttp.ClientSession,
    config: PublisherConfig,
    image_id: str,
    token: str | None = None,
) -> None:
    """Remove the image with ``image_id`` from the catalog.

    Raises:
        CatalogConnectionError: If the catalog cannot be reached
        ImageDeleteError: If the catalog refuses the deletion
    """
    trace(logger, "Removing image with id = %s...", image_id)

    try:
        result = await make_request(
            session,
            "DELETE",
            image_url(config, image_id),
            headers=auth_headers(token),
            timeout=request_timeout(config),
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise CatalogConnectionError(f"Failed to delete image {image_id}: {e}") from e

    if not result.ok:
        raise ImageDeleteError(
            f"Failed to delete image {image_id}: HTTP {result.status_code}",
            status=result.status_code,
        )

    trace(logger, "Image removed.")


async def create_image(
    session: aiohttp.ClientSession,
    config: PublisherConfig,
    artifact: DiskArtifact,
    *,
    name: str,
    disk_format: str,
    container_format: str,
    is_public: bool,
    distro: str,
    token: str | None = None,
) -> ImageDescriptor:
    """Upload a disk image and register it in the catalog.

    The whole disk is sent as the body of one request of known length;
    the metadata travels in ``x-image-meta-*`` headers.

    Args:
        session: Client session
        config: Publisher configuration
        artifact: Disk file to upload
        name: Image name
        disk_format: Disk format, e.g. raw or vmdk
        container_format: Container format, e.g. bare or ami
        is_public: Whether the image is visible to all tenants
        distro: Value of the ``distro`` image property
        token: Optional access token

    Returns:
        Descriptor of the registered image

    Raises:
        ImageUploadError: If the upload is interrupted or rejected
    """
    headers = build_image_headers(
        artifact, name, disk_format, container_format, is_public, distro, token
    )
    timeout = aiohttp.ClientTimeout(
        total=config.upload_timeout, sock_connect=config.timeout
    )

    trace(
        logger,
        "Disk format: %s, container format: %s, public: %s, size: %s.",
        disk_format,
        container_format,
        is_public,
        artifact.size,
    )

    try:
        async with aiofiles.open(artifact.path, "rb") as disk:
            async with session.post(
                image_url(config),
                data=_read_chunks(disk, config.chunk_size),
                headers=headers,
                timeout=timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ImageUploadError(f"Failed to upload image '{name}': {e}") from e

    if not 200 <= status < 300:
        raise ImageUploadError(
            f"Failed to upload image '{name}': HTTP {status}", status=status
        )

    body = parse_json_response(text)
    image = body.get("image") if isinstance(body, dict) else None
    if not isinstance(image, dict) or "id" not in image:
        raise ImageUploadError(
            f"Invalid response registering image '{name}'", status=status
        )

    return ImageDescriptor.from_dict(image)
