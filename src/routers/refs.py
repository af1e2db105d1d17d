"""
参考页 API — 章节之外的二级页面（如 422viskovatov.htm）

只接受简单文件名，路径参数允许带斜杠，以便 ../ 之类的输入进入校验并返回 400。
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from core.errors import AdaError

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["refs"])


@router.get("/ref/{file:path}")
async def get_reference(request: Request, file: str):
    """返回 {title, html}"""
    pipeline = request.app.state.pipeline
    try:
        page = await pipeline.get_reference(file)
    except AdaError as e:
        log.warning(f"参考页 {file!r} 加载失败 ({e.status_code}): {e.message}")
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except Exception:
        log.exception(f"参考页 {file!r} 处理出错")
        return JSONResponse({"error": "Server error"}, status_code=500)

    return JSONResponse(page.to_dict())
