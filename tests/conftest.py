"""Test configuration and fixtures."""

import logging

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from openstack_image_publisher import ApplianceInfo, PublisherConfig
from openstack_image_publisher.core.session import create_session
from tests.helpers import FakeCloud


@pytest_asyncio.fixture
async def fake_cloud():
    """Start a fake identity and image catalog service."""
    cloud = FakeCloud()
    server = TestServer(cloud.app)
    await server.start_server()
    cloud.port = server.port
    yield cloud
    await server.close()


@pytest.fixture
def cloud_options(fake_cloud):
    """Plugin options pointing both services at the fake cloud."""
    return {
        "host": "127.0.0.1",
        "glance_port": fake_cloud.port,
        "nova_port": fake_cloud.port,
    }


@pytest.fixture
def credential_options(cloud_options):
    return {**cloud_options, "tenant_id": "tenant-1", "user": "admin", "password": "secret"}


@pytest.fixture
def cloud_config(cloud_options):
    return PublisherConfig.from_options(cloud_options)


@pytest_asyncio.fixture
async def session():
    client_session = await create_session()
    yield client_session
    await client_session.close()


@pytest.fixture
def appliance():
    return ApplianceInfo(name="jeos", version=1, release=2, os_name="fedora", os_version="16")


@pytest.fixture
def disk_file(tmp_path):
    """Create a small fake disk image."""
    path = tmp_path / "jeos-sda.raw"
    path.write_bytes(b"\x00" * 4096 + b"bootable disk payload")
    return path


@pytest.fixture
def capture_logger(caplog):
    """Logger whose records are captured at every level."""
    logger = logging.getLogger("tests.publisher")
    caplog.set_level(1, logger="tests.publisher")
    return logger


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
