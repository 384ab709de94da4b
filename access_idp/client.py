"""
Access API HTTP Client

使用 httpx 实现，所有资源共用的请求分发层：
- Bearer token 认证
- 非 2xx 响应解析为 RequestError (带 API 返回的 errors)
- 支持单次请求超时和通过 threading.Event 取消

不做重试、限流和请求签名。
"""

import logging
import threading
from typing import Any

import httpx

from .models import ResponseInfo

logger = logging.getLogger(__name__)

DEFAULT_API_ENDPOINT = "https://api.cloudflare.com/client/v4"

ERR_MAKE_REQUEST = "请求 API 失败"
ERR_UNMARSHAL = "解析 JSON 响应失败"


class APIClientError(Exception):
    """Access API 客户端错误"""
    def __init__(
        self,
        message: str,
        errors: list[ResponseInfo] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.errors = errors or []
        self.status_code = status_code


class RequestError(APIClientError):
    """请求没有成功到达服务端或服务端返回错误状态"""
    pass


class RequestCancelledError(RequestError):
    """请求被取消或超时"""
    pass


class DecodeError(APIClientError):
    """响应内容不符合预期的 JSON 结构"""
    pass


def _parse_error_infos(resp: httpx.Response) -> list[ResponseInfo]:
    """尽量从错误响应中解析 errors 数组，解析不了返回空列表"""
    try:
        data = resp.json()
    except ValueError:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("errors"), list):
        return []
    infos = []
    for item in data["errors"]:
        try:
            infos.append(ResponseInfo.from_dict(item))
        except TypeError:
            continue
    return infos


class APIClient:
    """
    Access API 客户端

    只负责 "发送请求，返回原始响应字节"，
    具体资源的 URI 拼接和响应解析由各资源客户端完成。
    """

    def __init__(
        self,
        token: str,
        endpoint: str = DEFAULT_API_ENDPOINT,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        初始化客户端

        Args:
            token: API token
            endpoint: API 根地址
            timeout: 默认请求超时时间
            transport: 自定义 httpx transport (测试用)
        """
        if not token:
            raise ValueError("API token 是必填字段")
        self.timeout = timeout
        self.client = httpx.Client(
            base_url=endpoint.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self._identity_providers = None

    def close(self):
        """关闭连接"""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @property
    def identity_providers(self):
        """Access Identity Provider 资源客户端"""
        if self._identity_providers is None:
            from .identity_providers import IdentityProviderClient
            self._identity_providers = IdentityProviderClient(self)
        return self._identity_providers

    # ============ 底层请求方法 ============

    def make_request(
        self,
        method: str,
        uri: str,
        body: Any = None,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> bytes:
        """
        发送请求

        Args:
            method: HTTP 方法
            uri: 相对于 endpoint 的路径 (可带 query)
            body: 请求体，带 to_dict() 的对象会先转换
            timeout: 本次请求超时时间，默认使用客户端超时
            cancel: 已 set 时直接取消，不发送请求 (不会打断已经发出的请求)

        Returns:
            原始响应内容

        Raises:
            RequestCancelledError: 请求被取消或超时
            RequestError: 网络错误或非 2xx 响应
        """
        if cancel is not None and cancel.is_set():
            raise RequestCancelledError(f"{method} {uri} 已取消")
        if timeout is not None and timeout <= 0:
            raise RequestCancelledError(f"{method} {uri} 已超时")

        payload = None
        if body is not None:
            payload = body.to_dict() if hasattr(body, "to_dict") else body

        logger.debug("%s %s", method, uri)
        try:
            resp = self.client.request(
                method,
                uri,
                json=payload,
                timeout=self.timeout if timeout is None else timeout,
            )
        except httpx.TimeoutException as e:
            raise RequestCancelledError(f"{method} {uri} 超时: {e}") from e
        except httpx.HTTPError as e:
            raise RequestError(f"{method} {uri}: {e}") from e

        if resp.is_success:
            return resp.content

        errors = _parse_error_infos(resp)
        detail = "; ".join(str(e) for e in errors) or resp.text or resp.reason_phrase
        logger.debug("%s %s 返回 %s: %s", method, uri, resp.status_code, detail)
        raise RequestError(
            f"HTTP {resp.status_code}: {detail}",
            errors=errors,
            status_code=resp.status_code,
        )
