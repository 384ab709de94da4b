"""
测试公共 fixture - 用 httpx.MockTransport 代替真实 API
"""

import httpx
import pytest

from access_idp import APIClient

from .helpers import ENDPOINT


@pytest.fixture
def mock_api():
    """
    返回工厂: mock_api(handler) -> (APIClient, 已发送的请求列表)
    """
    clients = []

    def factory(handler):
        calls: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        client = APIClient("test-token", endpoint=ENDPOINT, transport=httpx.MockTransport(recording))
        clients.append(client)
        return client, calls

    yield factory

    for client in clients:
        client.close()
