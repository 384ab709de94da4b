"""
资源容器 (ResourceContainer)

Access 资源可以挂在 account 或 zone 下，URI 前缀由容器决定：
/{level}/{identifier}
"""

from dataclasses import dataclass
from enum import Enum


class ResourceContainerError(ValueError):
    """资源容器参数错误"""
    pass


class RouteLevel(str, Enum):
    """路由层级"""
    ACCOUNT = "accounts"
    ZONE = "zones"


@dataclass(frozen=True)
class ResourceContainer:
    """
    资源容器

    Args:
        level: 路由层级 (accounts / zones)
        identifier: account ID 或 zone ID
    """
    level: RouteLevel
    identifier: str

    def __post_init__(self):
        if not isinstance(self.level, RouteLevel):
            try:
                object.__setattr__(self, "level", RouteLevel(self.level))
            except ValueError:
                raise ResourceContainerError(f"不支持的路由层级: {self.level}") from None
        if not self.identifier:
            raise ResourceContainerError(f"{self.level.value} 的 identifier 是必填字段")

    @classmethod
    def account(cls, account_id: str) -> "ResourceContainer":
        return cls(RouteLevel.ACCOUNT, account_id)

    @classmethod
    def zone(cls, zone_id: str) -> "ResourceContainer":
        return cls(RouteLevel.ZONE, zone_id)

    def base_path(self) -> str:
        return f"/{self.level.value}/{self.identifier}"

    def __str__(self) -> str:
        return self.base_path()
