"""
错误分类

所有错误都以 JSON {"error": ...} 返回给客户端，不做自动重试。
"""


class AdaError(Exception):
    """基类：携带 HTTP 状态码与面向用户的错误信息"""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ChapterNotFound(AdaError):
    """未知的章节 id"""

    status_code = 404
    default_message = "Unknown chapter id"


class UpstreamFailure(AdaError):
    """上游站点返回非成功状态码，或网络错误"""

    status_code = 502
    default_message = "Failed to fetch upstream page"

    def __init__(self, message: str | None = None, url: str = "", status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class InvalidReference(AdaError):
    """参考页文件名不符合安全格式"""

    status_code = 400
    default_message = "Invalid reference file"
