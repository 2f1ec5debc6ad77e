"""Image registration workflow."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import aiohttp

from .core.log import get_logger
from .core.session import create_session
from .core.types import (
    ApplianceInfo,
    DiskArtifact,
    ImageDescriptor,
    PublisherConfig,
)
from .formats import PlatformKind, UpstreamStage, resolve_formats
from .operations.images import create_image, delete_image, list_images
from .operations.tokens import request_token


class RegistrationState(str, Enum):
    """Steps of one registration run."""

    INIT = "init"
    AUTHENTICATING = "authenticating"
    SEARCHING = "searching"
    RECONCILING = "reconciling"
    UPLOADING = "uploading"
    DONE = "done"
    BLOCKED = "blocked"


@dataclass
class RegistrationResult:
    """Outcome of a registration run."""

    state: RegistrationState
    image_name: str
    image: ImageDescriptor | None = None
    removed_ids: list[str] = field(default_factory=list)
    authenticated: bool = False

    @property
    def registered(self) -> bool:
        return self.state is RegistrationState.DONE and self.image is not None


def derive_image_name(appliance: ApplianceInfo, disk_format: str) -> str:
    """Build the catalog name ``<name>-<version>.<release>-<disk_format>``."""
    return f"{appliance.name}-{appliance.version}.{appliance.release}-{disk_format}"


class ImageRegistration:
    """Registers one appliance disk image in the catalog.

    Each instance handles a single run: token, derived name and formats
    live on the instance and are not shared between runs.
    """

    def __init__(
        self,
        config: PublisherConfig,
        appliance: ApplianceInfo,
        disk_path: str | Path,
        upstream: UpstreamStage | PlatformKind | str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.appliance = appliance
        self.disk_path = Path(disk_path)
        self.upstream = upstream
        self.log = get_logger(__name__, logger)
        self.state = RegistrationState.INIT

        self.disk_format, self.container_format = resolve_formats(upstream)
        self.image_name = derive_image_name(appliance, self.disk_format)

    def _transition(self, state: RegistrationState) -> None:
        self.log.debug(
            "Registration of '%s': %s -> %s.",
            self.image_name,
            self.state.value,
            state.value,
        )
        self.state = state

    async def execute(
        self, session: aiohttp.ClientSession | None = None
    ) -> RegistrationResult:
        """Run the registration.

        Args:
            session: Client session to use; a new one is created and closed
                when omitted

        Returns:
            RegistrationResult, in BLOCKED state when images with the same
            name exist and overwrite is disabled

        Raises:
            ArtifactNotFoundError: If the disk image is missing
            IdentityConnectionError: If the identity service is unreachable
            CatalogError: If listing, deleting or uploading fails
        """
        # Fails before any request is made.
        artifact = DiskArtifact.from_path(self.disk_path)

        if session is not None:
            return await self._run(session, artifact)

        session = await create_session()
        try:
            return await self._run(session, artifact)
        finally:
            await session.close()

    async def _run(
        self, session: aiohttp.ClientSession, artifact: DiskArtifact
    ) -> RegistrationResult:
        result = RegistrationResult(state=self.state, image_name=self.image_name)
        token = None

        credentials = self.config.credentials
        if credentials is not None:
            self._transition(RegistrationState.AUTHENTICATING)
            token_result = await request_token(
                session, self.config, credentials, log=self.log
            )
            token = token_result.token
            result.authenticated = token_result.authenticated
            if not token_result.authenticated:
                self.log.info("Proceeding without authentication.")

        self._transition(RegistrationState.SEARCHING)
        self.log.debug("Checking if '%s' appliance is already registered...", self.image_name)
        images = await list_images(session, self.config, name=self.image_name, token=token)

        if images:
            self.log.debug(
                "We found %d appliance(s) with the name '%s'.", len(images), self.image_name
            )

            if not self.config.overwrite:
                self._transition(RegistrationState.BLOCKED)
                self.log.error(
                    "One or more appliances are already registered with the name '%s'. "
                    "You can specify 'overwrite' parameter to remove them.",
                    self.image_name,
                )
                result.state = self.state
                return result

            self._transition(RegistrationState.RECONCILING)
            self.log.info(
                "Removing all images with name '%s' because 'overwrite' parameter is set to true...",
                self.image_name,
            )
            for image in images:
                await delete_image(session, self.config, image.id, token=token)
                result.removed_ids.append(image.id)
            self.log.info("Images removed.")

        self._transition(RegistrationState.UPLOADING)
        # Resolved again at upload time rather than reusing the values from __init__.
        disk_format, container_format = resolve_formats(self.upstream)

        self.log.info("Uploading and registering '%s' appliance in OpenStack...", self.image_name)
        image = await create_image(
            session,
            self.config,
            artifact,
            name=self.image_name,
            disk_format=disk_format,
            container_format=container_format,
            is_public=self.config.public,
            distro=self.appliance.distro_label,
            token=token,
        )

        self._transition(RegistrationState.DONE)
        self.log.info("Appliance registered under id = %s.", image.id)
        result.state = self.state
        result.image = image
        return result
