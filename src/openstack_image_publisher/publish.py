"""Async functional publishing operations."""

import logging
from pathlib import Path
from typing import Any, Mapping

from .core.session import create_session
from .core.types import ApplianceInfo, ImageDescriptor, PublisherConfig
from .formats import PlatformKind, UpstreamStage
from .operations.images import list_images
from .operations.tokens import request_token
from .workflow import ImageRegistration, RegistrationResult


async def publish_disk_image(
    disk_path: str | Path,
    appliance: ApplianceInfo,
    options: Mapping[str, Any] | None = None,
    upstream: UpstreamStage | PlatformKind | str | None = None,
    logger: logging.Logger | None = None,
) -> RegistrationResult:
    """디스크 이미지를 OpenStack 이미지 카탈로그에 등록합니다.

    이미지 이름은 `<name>-<version>.<release>-<disk_format>` 형식으로 만들어지며,
    같은 이름의 이미지가 이미 있으면 `overwrite` 옵션에 따라 삭제 후 업로드하거나
    업로드 없이 종료합니다.

    Args:
        disk_path: 업로드할 디스크 이미지 경로 (예: "build/appliances/jeos-sda.raw")
        appliance: 어플라이언스 이름, 버전, 릴리스, OS 정보
        options: 플러그인 옵션 (예: {"host": "cloud.example.com", "overwrite": True})
        upstream: 디스크를 만든 플랫폼 단계 (예: PlatformKind.VMWARE, "ec2", None)
        logger: 진행 상황을 기록할 로거 (기본값: 모듈 로거)

    Returns:
        RegistrationResult: 실행 결과 (등록된 이미지, 삭제된 이미지 id 목록 포함)

    Raises:
        ConfigurationError: 옵션 값이 잘못된 경우
        ArtifactNotFoundError: 디스크 이미지 파일이 없는 경우
        CatalogError: 조회, 삭제 또는 업로드 실패 시

    Examples:
        # 인증 없이 로컬 Glance에 등록
        appliance = ApplianceInfo("jeos", 1, 0, "fedora", "16")
        result = await publish_disk_image("jeos-sda.raw", appliance)
        print(f"등록된 이미지 id: {result.image.id}")

        # 기존 이미지를 덮어쓰고 VMware 디스크로 등록
        result = await publish_disk_image(
            "jeos.vmdk",
            appliance,
            options={"overwrite": True, "tenant_id": "t1", "user": "admin", "password": "secret"},
            upstream=PlatformKind.VMWARE,
        )
    """
    config = PublisherConfig.from_options(options)
    registration = ImageRegistration(
        config, appliance, disk_path, upstream=upstream, logger=logger
    )
    return await registration.execute()


async def find_images(
    name: str | None = None,
    options: Mapping[str, Any] | None = None,
) -> list[ImageDescriptor]:
    """카탈로그에서 이름으로 이미지를 검색합니다.

    자격 증명이 설정되어 있으면 토큰을 먼저 발급받아 사용합니다.

    Args:
        name: 검색할 이미지 이름 (생략 시 모든 이미지)
        options: 플러그인 옵션 (`publish_disk_image`와 동일)

    Returns:
        list[ImageDescriptor]: 이름이 일치하는 이미지 목록

    Raises:
        CatalogError: 조회 실패 시

    Examples:
        images = await find_images("jeos-1.0-raw", {"host": "cloud.example.com"})
        print([image.id for image in images])
    """
    config = PublisherConfig.from_options(options)
    session = await create_session()
    try:
        token = None
        if config.credentials is not None:
            token = (await request_token(session, config, config.credentials)).token
        return await list_images(session, config, name=name, token=token)
    finally:
        await session.close()
