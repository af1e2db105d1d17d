"""
AdaOnline 移动阅读 · 运行配置

所有路径均使用 pathlib 动态拼接，上游地址与端口可由环境变量覆盖。
支持 .env 文件覆盖默认值。
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ─── 项目根目录（launcher.py 所在位置） ─────────────────────
# src/config.py → 上一级就是项目根
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ─── src 目录（源代码所在位置） ───────────────────────────────
SRC_DIR = Path(__file__).resolve().parent

# ─── 上游站点（AdaOnline） ───────────────────────────────────
# 结尾必须带 /，章节与参考页文件名直接拼接在其后
ADA_BASE = os.getenv("ADA_BASE", "https://www.ada.auckland.ac.nz/")
if not ADA_BASE.endswith("/"):
    ADA_BASE += "/"

# 上游请求超时（秒）；未设置时不单独限制，沿用传输层默认行为
_timeout = os.getenv("FETCH_TIMEOUT", "").strip()
FETCH_TIMEOUT = float(_timeout) if _timeout else None

USER_AGENT = os.getenv(
    "USER_AGENT",
    "AdaMobileReader/0.1 (+https://www.ada.auckland.ac.nz/)",
)

# ─── 静态资源（前端构建产物，可选） ──────────────────────────
STATIC_DIR = Path(os.getenv("STATIC_DIR", str(SRC_DIR / "static")))

# ─── 开发服务器 ──────────────────────────────────────────────
DEV_HOST = os.getenv("DEV_HOST", "0.0.0.0")
DEV_PORT = int(os.getenv("DEV_PORT", "3000"))

# ─── 阅读客户端默认连接的 API 地址 ───────────────────────────
API_BASE = os.getenv("API_BASE", f"http://localhost:{DEV_PORT}")


# ─── 配置摘要（调试用） ──────────────────────────────────────
def print_config():
    """打印当前配置，用于调试"""
    print("=" * 50)
    print("AdaOnline 移动阅读 · 运行配置")
    print("=" * 50)
    print(f"  项目根目录:    {PROJECT_ROOT}")
    print(f"  源代码目录:    {SRC_DIR}")
    print(f"  上游站点:      {ADA_BASE}")
    print(f"  请求超时:      {FETCH_TIMEOUT if FETCH_TIMEOUT is not None else '默认'}")
    print(f"  静态资源:      {STATIC_DIR}  {'✓' if STATIC_DIR.exists() else '✗'}")
    print(f"  客户端 API:    {API_BASE}")
    print(f"  服务地址:      http://{DEV_HOST}:{DEV_PORT}")
    print("=" * 50)


if __name__ == "__main__":
    print_config()
