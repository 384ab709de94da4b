"""
分页参数与分页结果

API 使用 page / per_page 分页，响应中的 result_info 给出总页数。
"""

from dataclasses import dataclass, replace
from urllib.parse import urlencode

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 25


@dataclass(frozen=True)
class PaginationOptions:
    """
    分页参数

    page 和 per_page 都小于 1 时自动翻页，返回全部数据；
    任意一个被显式设置时只请求指定的那一页。
    """
    page: int = 0
    per_page: int = 0

    @property
    def auto_paginate(self) -> bool:
        return self.page < 1 and self.per_page < 1

    def with_defaults(self) -> "PaginationOptions":
        """填充默认值: page=1, per_page=25"""
        return PaginationOptions(
            page=self.page if self.page >= 1 else DEFAULT_PAGE,
            per_page=self.per_page if self.per_page >= 1 else DEFAULT_PER_PAGE,
        )


@dataclass(frozen=True)
class ResultInfo:
    """响应中的分页信息 (result_info)"""
    page: int = 0
    per_page: int = 0
    count: int = 0
    total_pages: int = 0
    total_count: int = 0

    def next(self) -> "ResultInfo":
        """下一页"""
        return replace(self, page=self.page + 1)

    def done(self) -> bool:
        """是否已经越过最后一页"""
        return self.page > 1 and self.page > self.total_pages

    def has_more_pages(self) -> bool:
        return self.page < self.total_pages

    def to_params(self) -> dict:
        """只返回有值的分页参数"""
        params = {}
        if self.page > 0:
            params["page"] = self.page
        if self.per_page > 0:
            params["per_page"] = self.per_page
        return params

    @classmethod
    def from_options(cls, options: PaginationOptions) -> "ResultInfo":
        return cls(page=options.page, per_page=options.per_page)

    @classmethod
    def from_dict(cls, data: dict) -> "ResultInfo":
        if not isinstance(data, dict):
            raise TypeError(f"result_info 应为 object, 实际为 {type(data).__name__}")
        values = {}
        for key in ("page", "per_page", "count", "total_pages", "total_count"):
            value = data.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"result_info.{key} 应为整数: {value!r}")
            values[key] = value
        return cls(**values)


def build_uri(path: str, result_info: ResultInfo) -> str:
    """拼接带分页参数的 URI"""
    params = result_info.to_params()
    if not params:
        return path
    return f"{path}?{urlencode(params)}"
