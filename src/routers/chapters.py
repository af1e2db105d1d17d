"""
章节 API — 目录列表 + 单章规范化内容

  GET /api/chapters       章节列表（目录顺序）
  GET /api/chapter/{id}   正文与注释两个 HTML 片段
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from core.errors import AdaError

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chapters"])


@router.get("/chapters")
async def list_chapters(request: Request):
    """章节列表：[{id, title, textUrl}]"""
    catalog = request.app.state.catalog
    return JSONResponse(catalog.summaries())


@router.get("/chapter/{chapter_id}")
async def get_chapter(request: Request, chapter_id: str):
    """
    抓取并规范化一章。
    404 未知章节；502 上游抓取失败；500 其他错误。
    """
    pipeline = request.app.state.pipeline
    try:
        doc = await pipeline.get_chapter(chapter_id)
    except AdaError as e:
        log.warning(f"章节 {chapter_id} 加载失败 ({e.status_code}): {e.message}")
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except Exception:
        log.exception(f"章节 {chapter_id} 处理出错")
        return JSONResponse({"error": "Server error"}, status_code=500)

    return JSONResponse(doc.to_dict())
