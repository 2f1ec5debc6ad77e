"""Example: register a disk image in a Glance catalog."""

import asyncio
import logging
import sys

from openstack_image_publisher import (
    ApplianceInfo,
    PlatformKind,
    PublisherError,
    RegistrationState,
    find_images,
    publish_disk_image,
)

# Set up logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


async def main(disk_path: str) -> int:
    options = {
        "host": "localhost",
        "overwrite": True,
        "public": False,
        # "tenant_id": "admin", "user": "admin", "password": "secret",
    }
    appliance = ApplianceInfo(
        name="jeos", version=1, release=0, os_name="fedora", os_version="16"
    )

    try:
        result = await publish_disk_image(
            disk_path,
            appliance,
            options,
            upstream=PlatformKind.VIRTUALBOX,
            logger=logger,
        )
    except PublisherError as e:
        logger.error(f"Publishing failed: {e}")
        return 1

    if result.state is RegistrationState.BLOCKED:
        return 0

    images = await find_images(result.image_name, options)
    logger.info(f"Catalog now holds {len(images)} image(s) named {result.image_name}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "jeos.vmdk")))
