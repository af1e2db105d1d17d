"""
AdaOnline 移动阅读 · FastAPI 主程序

按需抓取 AdaOnline 旧版页面，规范化为移动端可直接渲染的 HTML 片段，
通过 JSON API 提供给阅读客户端。
"""

import logging

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
import uvicorn

import config
from core.ada_catalog import AdaCatalog
from core.ada_pipeline import AdaFetcher, ChapterPipeline
from routers import chapters, refs

# ─── 日志 ─────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
log = logging.getLogger(__name__)

# ─── 应用 ─────────────────────────────────────────────────────
app = FastAPI(title="AdaOnline 移动阅读", version="0.1.0")

# ─── 注册路由 ─────────────────────────────────────────────────
app.include_router(chapters.router)
app.include_router(refs.router)


# ─── 初始化核心模块 ───────────────────────────────────────────
# 目录是唯一跨请求共享的状态（只读）
app.state.catalog = None
app.state.pipeline = None

@app.on_event("startup")
async def init_core_modules():
    """启动时生成章节目录并创建抓取管线"""
    catalog = AdaCatalog(config.ADA_BASE)
    app.state.catalog = catalog
    app.state.pipeline = ChapterPipeline(catalog=catalog, fetcher=AdaFetcher())
    log.info(f"上游站点: {config.ADA_BASE}")


@app.get("/api/health")
async def health(request: Request):
    """运行状态（launcher 启动后用于探测服务是否就绪）"""
    catalog = request.app.state.catalog
    return {
        "ok": catalog is not None,
        "chapters": len(catalog) if catalog else 0,
        "upstream": config.ADA_BASE,
    }


# ─── 前端静态资源（可选，必须最后挂载，避免遮蔽 /api） ────────
if config.STATIC_DIR.exists():
    app.mount("/", StaticFiles(directory=str(config.STATIC_DIR), html=True), name="static")
    log.info(f"  静态资源: {config.STATIC_DIR} ✓")


# ─── 入口 ─────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.DEV_HOST,
        port=config.DEV_PORT,
        reload=True,
    )
