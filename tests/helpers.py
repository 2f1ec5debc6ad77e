"""Fake OpenStack services for tests."""

import itertools

from aiohttp import web

VALID_TOKEN = "token-0123456789"


class FakeCloud:
    """In-process stand-in for Keystone v2.0 and Glance v1."""

    def __init__(self) -> None:
        self.images: dict[str, dict] = {}
        self.calls: list[dict] = []
        self.uploads: list[dict] = []
        self.token_status = 200
        self.token_body: dict | None = None
        self.require_token = False
        self.list_status = 200
        self.upload_status = 201
        self.failing_deletes: set[str] = set()
        self.port: int | None = None
        self._ids = (f"img-{n}" for n in itertools.count(1))

        self.app = web.Application()
        self.app.router.add_post("/v2.0/tokens", self.issue_token)
        self.app.router.add_get("/v1/images", self.list_images)
        self.app.router.add_post("/v1/images", self.create_image)
        self.app.router.add_delete("/v1/images/{image_id}", self.delete_image)

    def add_image(self, name: str, **fields) -> str:
        image_id = next(self._ids)
        self.images[image_id] = {
            "id": image_id,
            "name": name,
            "disk_format": "raw",
            "container_format": "bare",
            "size": 0,
            **fields,
        }
        return image_id

    def calls_to(self, method: str, prefix: str = "/v1/images") -> list[dict]:
        return [
            call
            for call in self.calls
            if call["method"] == method and call["path"].startswith(prefix)
        ]

    def _record(self, request: web.Request, **extra) -> dict:
        call = {
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "headers": request.headers.copy(),
            **extra,
        }
        self.calls.append(call)
        return call

    def _authorized(self, request: web.Request) -> bool:
        if not self.require_token:
            return True
        return request.headers.get("x-auth-token") == VALID_TOKEN

    async def issue_token(self, request: web.Request) -> web.Response:
        self._record(request, body=await request.json())
        if self.token_status != 200:
            return web.json_response({"error": {"code": self.token_status}}, status=self.token_status)
        body = self.token_body or {
            "access": {
                "token": {"id": VALID_TOKEN, "expires": "2030-01-01T00:00:00Z"},
                "serviceCatalog": [],
            }
        }
        return web.json_response(body)

    async def list_images(self, request: web.Request) -> web.Response:
        self._record(request)
        if not self._authorized(request):
            return web.Response(status=401)
        if self.list_status != 200:
            return web.Response(status=self.list_status)
        name = request.query.get("name")
        images = [
            image
            for image in self.images.values()
            if name is None or image["name"] == name
        ]
        return web.json_response({"images": images})

    async def delete_image(self, request: web.Request) -> web.Response:
        self._record(request)
        if not self._authorized(request):
            return web.Response(status=401)
        image_id = request.match_info["image_id"]
        if image_id in self.failing_deletes:
            return web.Response(status=500)
        if self.images.pop(image_id, None) is None:
            return web.Response(status=404)
        return web.Response(status=200)

    async def create_image(self, request: web.Request) -> web.Response:
        data = await request.read()
        call = self._record(request, body=data)
        if not self._authorized(request):
            return web.Response(status=401)
        if self.upload_status >= 300:
            return web.Response(status=self.upload_status)

        headers = call["headers"]
        image_id = self.add_image(
            headers["x-image-meta-name"],
            disk_format=headers["x-image-meta-disk-format"],
            container_format=headers["x-image-meta-container-format"],
            is_public=headers["x-image-meta-is-public"] == "true",
            size=int(headers["x-image-meta-size"]),
            status="active",
            properties={"distro": headers["x-image-meta-property-distro"]},
        )
        self.uploads.append(call)
        return web.json_response({"image": self.images[image_id]}, status=self.upload_status)


