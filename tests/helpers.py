"""
测试用的 API 响应构造
"""

ENDPOINT = "https://api.example.com/client/v4"
BASE = "/client/v4"


def idp_payload(provider_id: str, name: str = "Okta", type: str = "okta", **config) -> dict:
    """构造 API 返回的单条 identity provider"""
    return {
        "id": provider_id,
        "name": name,
        "type": type,
        "config": config,
        "scim_config": {},
    }


def list_body(items: list[dict], page: int, per_page: int, total_count: int) -> dict:
    total_pages = (total_count + per_page - 1) // per_page
    return {
        "success": True,
        "errors": [],
        "messages": [],
        "result": items,
        "result_info": {
            "page": page,
            "per_page": per_page,
            "count": len(items),
            "total_pages": total_pages,
            "total_count": total_count,
        },
    }
