"""
阅读客户端 · API 访问
"""

import logging
from urllib.parse import quote

import requests

import config

log = logging.getLogger(__name__)


class ApiError(Exception):
    """API 返回非成功状态码或网络错误"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ReaderApi:
    """封装 /api/chapters 与 /api/chapter/{id}"""

    def __init__(self, base_url: str | None = None, session: requests.Session | None = None):
        self.base_url = (base_url or config.API_BASE).rstrip("/")
        self.session = session or requests.Session()

    def _get_json(self, path: str):
        url = f"{self.base_url}{path}"
        log.debug(f"GET {url}")
        try:
            resp = self.session.get(url)
        except requests.RequestException as e:
            raise ApiError(f"请求失败: {e}") from e
        if not resp.ok:
            raise ApiError(f"HTTP {resp.status_code}", status=resp.status_code)
        return resp.json()

    def list_chapters(self) -> list[dict]:
        return self._get_json("/api/chapters")

    def get_chapter(self, chapter_id: str) -> dict:
        return self._get_json(f"/api/chapter/{quote(chapter_id, safe='')}")

