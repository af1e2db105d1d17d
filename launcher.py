#!/usr/bin/env python3
"""
AdaOnline 移动阅读 · 一键启动脚本

生命周期：
  Step 1  上游自检 — 检查 AdaOnline 站点是否可访问
  Step 2  服务启动 — 启动 FastAPI 后端
  Step 3  终端贴士 — 打印访问地址与接口说明，自动打开浏览器

用法:
  python launcher.py              # 正常启动
  python launcher.py --check      # 仅运行自检，不启动服务
  python launcher.py --port 8080  # 指定端口
"""

import sys
import time
import argparse
import socket
import webbrowser
import threading
import unicodedata
from pathlib import Path

import requests

# ─── 确保 src/ 在 Python 搜索路径中 ─────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))


# ============================================================
# 终端显示辅助函数（中英文混排自动对齐）
# ============================================================

def display_width(text):
    """计算终端显示宽度（中文全角=2, 英文半角=1, 零宽字符=0）"""
    width = 0
    for c in text:
        if unicodedata.category(c) in ('Mn', 'Me', 'Cf'):
            continue
        width += 2 if unicodedata.east_asian_width(c) in ('W', 'F') else 1
    return width


def box_center(content, inner_width, border="║"):
    """打印居中对齐的边框行"""
    pad = inner_width - display_width(content)
    left = pad // 2
    print(f"  {border}{' ' * left}{content}{' ' * (pad - left)}{border}")


def box_left(content, inner_width, border="│"):
    """打印左对齐的边框行"""
    pad = max(inner_width - display_width(content), 1)
    print(f"  {border}{content}{' ' * pad}{border}")


def print_banner():
    """打印启动横幅"""
    W = 38
    print()
    print(f"  ╔{'═' * W}╗")
    box_center("Ada 移 动 阅 读", W)
    box_center("AdaOnline Mobile Reader  v0.1", W)
    print(f"  ╚{'═' * W}╝")
    print()


def print_step(step_num, title, status=""):
    """打印步骤状态"""
    icons = {1: "🔍", 2: "🚀", 3: "📋"}
    icon = icons.get(step_num, "•")
    status_str = f"  {status}" if status else ""
    print(f"  {icon} Step {step_num}: {title}{status_str}")


def check_port_available(host, port):
    """检查端口是否可用"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return True
        except OSError:
            return False


def wait_for_server(host, port, timeout=15):
    """轮询 /api/health，直到服务就绪（最多 timeout 秒）"""
    url = f"http://{host}:{port}/api/health"
    start = time.time()
    while time.time() - start < timeout:
        try:
            if requests.get(url, timeout=1).ok:
                return True
        except requests.RequestException:
            time.sleep(0.5)
    return False


# ============================================================
# Step 1: 上游自检
# ============================================================

def check_upstream(base_url, sample="ada11.htm"):
    """
    抓取一个已知章节页，确认上游站点可访问。
    返回: (ok: bool, detail: str)
    """
    url = f"{base_url}{sample}"
    try:
        resp = requests.get(url, timeout=10)
    except requests.RequestException as e:
        return False, str(e)
    if not resp.ok:
        return False, f"HTTP {resp.status_code}"
    return True, f"{url} ({len(resp.content)} 字节)"


# ============================================================
# Step 2 & 3: 服务启动 + 终端贴士
# ============================================================

def print_tips(host, port):
    """打印使用说明"""
    display_host = "localhost" if host in ("0.0.0.0", "::") else host
    url = f"http://{display_host}:{port}"

    W = 49
    print()
    print(f"  ┌{'─' * W}┐")
    box_left(f"  🌐 访问地址: {url}", W)
    print(f"  ├{'─' * W}┤")
    box_left("  📖 接口:", W)
    box_left("    GET /api/chapters        章节列表", W)
    box_left("    GET /api/chapter/<id>    正文 + 注释", W)
    box_left("    GET /api/ref/<file>.htm  参考页", W)
    print(f"  ├{'─' * W}┤")
    box_left("  ⌨️  快捷操作:", W)
    box_left("    Ctrl+C  停止服务", W)
    print(f"  └{'─' * W}┘")
    print()


def open_browser_delayed(host, port):
    """在后台线程中等待服务就绪后打开浏览器"""
    display_host = "localhost" if host in ("0.0.0.0", "::") else host
    if wait_for_server(display_host, port, timeout=15):
        try:
            webbrowser.open(f"http://{display_host}:{port}")
        except webbrowser.Error:
            pass  # 无图形环境（如 VPS）


def start_server(host, port, open_browser=True):
    """启动 FastAPI 服务"""
    print_step(2, "服务启动", f"⏳ 正在启动服务于 {host}:{port}...")

    if not check_port_available(host, port):
        print(f"  ⚠️  端口 {port} 已被占用，尝试端口 {port + 1}...")
        port += 1
        if not check_port_available(host, port):
            print(f"  ❌ 端口 {port} 也被占用，请手动指定: python launcher.py --port <端口号>")
            sys.exit(1)

    if open_browser:
        threading.Thread(
            target=open_browser_delayed,
            args=(host, port),
            daemon=True,
        ).start()

    print_step(3, "终端贴士")
    print_tips(host, port)

    # 启动 uvicorn（阻塞主线程）
    import uvicorn
    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=False,
        log_level="info",
        app_dir=str(SRC_DIR),
    )


# ============================================================
# 主流程
# ============================================================

def main():
    parser = argparse.ArgumentParser(
        description="AdaOnline 移动阅读 · 一键启动脚本",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--check", action="store_true",
        help="仅运行上游自检，不启动服务",
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="指定服务端口（默认 3000）",
    )
    parser.add_argument(
        "--host", type=str, default=None,
        help="指定绑定地址（默认 0.0.0.0）",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="启动后不自动打开浏览器",
    )
    args = parser.parse_args()

    print_banner()

    import config
    host = args.host or config.DEV_HOST
    port = args.port or config.DEV_PORT

    # Step 1: 上游自检（不可访问时仍可启动，章节请求会返回 502）
    print_step(1, "上游自检", "⏳ 检查 AdaOnline 站点...")
    ok, detail = check_upstream(config.ADA_BASE)
    if ok:
        print_step(1, "上游自检", f"✅ {detail}")
    else:
        print_step(1, "上游自检", f"⚠️  无法访问上游站点: {detail}")

    if args.check:
        print()
        config.print_config()
        print("\n  ✅ 自检完成。使用 `python launcher.py` 启动完整服务。")
        return

    start_server(host, port, open_browser=not args.no_browser)


if __name__ == "__main__":
    main()
