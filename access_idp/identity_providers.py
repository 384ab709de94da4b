"""
Access Identity Provider 资源客户端

URI 规则：
    /{accounts|zones}/{identifier}/access/identity_providers[/{provider_id}]

错误处理统一：
- 请求失败抛 RequestError，消息带操作名和 ERR_MAKE_REQUEST
- 响应解析失败抛 DecodeError，消息带操作名和 ERR_UNMARSHAL
- 列表自动翻页中途失败时不返回已拿到的部分数据
"""

import json
import logging
import threading
import time
from typing import Iterator

from .client import (
    APIClient,
    DecodeError,
    RequestError,
    ERR_MAKE_REQUEST,
    ERR_UNMARSHAL,
)
from .models import (
    IdentityProvider,
    IdentityProviderListResponse,
    IdentityProviderResponse,
)
from .pagination import (
    DEFAULT_PER_PAGE,
    PaginationOptions,
    ResultInfo,
    build_uri,
)
from .resource import ResourceContainer

logger = logging.getLogger(__name__)


class IdentityProviderClient:
    """
    Access Identity Provider 的 list / get / create / update / delete

    每次调用都是无状态的请求/响应，不做缓存。
    """

    def __init__(self, api: APIClient):
        self.api = api

    # ============ URI ============

    @staticmethod
    def _collection_path(container: ResourceContainer) -> str:
        return f"{container.base_path()}/access/identity_providers"

    @classmethod
    def _provider_path(cls, container: ResourceContainer, provider_id: str) -> str:
        if not provider_id:
            raise ValueError("identity provider id 是必填字段")
        return f"{cls._collection_path(container)}/{provider_id}"

    # ============ 请求 / 解析 ============

    def _request(
        self,
        operation: str,
        method: str,
        uri: str,
        body=None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> bytes:
        """发送请求，失败时加上操作名重新抛出 (保留原异常类型)"""
        try:
            return self.api.make_request(method, uri, body, timeout=timeout, cancel=cancel)
        except RequestError as e:
            logger.warning("%s 失败: %s", operation, e)
            raise type(e)(
                f"{operation}: {ERR_MAKE_REQUEST}: {e}",
                errors=e.errors,
                status_code=e.status_code,
            ) from e

    @staticmethod
    def _decode(operation: str, raw: bytes, envelope):
        """解析响应信封，任何结构不符都视为 DecodeError"""
        try:
            return envelope.from_dict(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning("%s 响应解析失败: %s", operation, e)
            raise DecodeError(f"{operation}: {ERR_UNMARSHAL}: {e}") from e

    # ============ 列表 ============

    def list_identity_providers(
        self,
        container: ResourceContainer,
        page_opts: PaginationOptions | None = None,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> tuple[list[IdentityProvider], ResultInfo]:
        """
        列出 Identity Provider

        page 和 per_page 都没设置时自动翻页，返回全部记录；
        否则只请求指定的一页。

        Args:
            container: account 或 zone
            page_opts: 分页参数
            timeout: 整个列表操作 (所有分页) 的超时时间
            cancel: set 后不再发起新的分页请求；
                已经发出的请求不会被打断，只受 timeout 限制

        Returns:
            (记录列表, 最后一次响应的分页信息)

        Raises:
            RequestError: 任意一页请求失败 (包括取消/超时)
            DecodeError: 任意一页响应解析失败
        """
        operation = "list_identity_providers"
        options = page_opts or PaginationOptions()
        auto_paginate = options.auto_paginate
        result_info = ResultInfo.from_options(options.with_defaults())
        base_path = self._collection_path(container)
        deadline = None if timeout is None else time.monotonic() + timeout

        providers: list[IdentityProvider] = []
        last_info = result_info
        while True:
            remaining = None if deadline is None else deadline - time.monotonic()
            raw = self._request(
                operation, "GET", build_uri(base_path, result_info),
                timeout=remaining, cancel=cancel,
            )
            response = self._decode(operation, raw, IdentityProviderListResponse)
            providers.extend(response.result)
            logger.debug(
                "%s: page %s 返回 %d 条记录", base_path, result_info.page, len(response.result)
            )

            if response.result_info is None:
                last_info = ResultInfo(
                    page=result_info.page,
                    per_page=result_info.per_page,
                    count=len(response.result),
                )
                break
            server_info = response.result_info
            last_info = server_info
            if not auto_paginate:
                break
            # 服务端可能不返回 page / per_page，以本次请求的页为准
            result_info = ResultInfo(
                page=max(server_info.page, result_info.page),
                per_page=server_info.per_page or result_info.per_page,
                total_pages=server_info.total_pages,
            ).next()
            if result_info.done():
                break

        logger.info("%s: 共 %d 个 identity provider", base_path, len(providers))
        return providers, last_info

    def iter_identity_providers(
        self,
        container: ResourceContainer,
        per_page: int = DEFAULT_PER_PAGE,
        *,
        cancel: threading.Event | None = None,
    ) -> Iterator[IdentityProvider]:
        """
        逐页迭代 Identity Provider

        和 list_identity_providers 不同，这里边请求边返回：
        中途失败时，之前的记录已经交给调用方。

        Yields:
            IdentityProvider 对象
        """
        page = 1
        while True:
            providers, info = self.list_identity_providers(
                container, PaginationOptions(page=page, per_page=per_page), cancel=cancel,
            )
            yield from providers
            current = max(info.page, page)
            if current >= info.total_pages:
                break
            page = current + 1

    def get_all_identity_providers(self, container: ResourceContainer) -> list[IdentityProvider]:
        """列出所有 Identity Provider (返回列表)"""
        providers, _ = self.list_identity_providers(container)
        return providers

    # ============ 单个资源 ============

    def get_identity_provider(
        self,
        container: ResourceContainer,
        provider_id: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> IdentityProvider:
        """获取单个 Identity Provider"""
        operation = "get_identity_provider"
        uri = self._provider_path(container, provider_id)
        raw = self._request(operation, "GET", uri, timeout=timeout, cancel=cancel)
        return self._decode(operation, raw, IdentityProviderResponse).result

    def create_identity_provider(
        self,
        container: ResourceContainer,
        provider: IdentityProvider,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> IdentityProvider:
        """
        创建 Identity Provider

        Returns:
            服务端保存的记录 (带分配的 id)
        """
        operation = "create_identity_provider"
        uri = self._collection_path(container)
        raw = self._request(operation, "POST", uri, provider, timeout=timeout, cancel=cancel)
        created = self._decode(operation, raw, IdentityProviderResponse).result
        logger.info("%s: 已创建 identity provider %s [id: %s]", uri, created.name, created.id)
        return created

    def update_identity_provider(
        self,
        container: ResourceContainer,
        provider_id: str,
        provider: IdentityProvider,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> IdentityProvider:
        """
        更新 Identity Provider (使用 PUT，整体替换)
        """
        operation = "update_identity_provider"
        uri = self._provider_path(container, provider_id)
        raw = self._request(operation, "PUT", uri, provider, timeout=timeout, cancel=cancel)
        return self._decode(operation, raw, IdentityProviderResponse).result

    def delete_identity_provider(
        self,
        container: ResourceContainer,
        provider_id: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> IdentityProvider:
        """
        删除 Identity Provider

        Returns:
            被删除记录的最后状态
        """
        operation = "delete_identity_provider"
        uri = self._provider_path(container, provider_id)
        raw = self._request(operation, "DELETE", uri, timeout=timeout, cancel=cancel)
        deleted = self._decode(operation, raw, IdentityProviderResponse).result
        logger.info("%s: 已删除 identity provider [id: %s]", uri, provider_id)
        return deleted
