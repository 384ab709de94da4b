#!/usr/bin/env python3
"""
Access Identity Provider CLI
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from access_idp import (
    APIClient,
    APIClientError,
    DEFAULT_API_ENDPOINT,
    IdentityProvider,
    IdentityProviderValidationError,
    PaginationOptions,
    ProviderConfiguration,
    ResourceContainer,
    ResourceContainerError,
    ScimConfiguration,
)

DEFAULT_CONFIG_FILE = "access-config.json"


def load_json(file: str) -> dict | list:
    path = Path(file)
    if not path.exists():
        return []
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_client(args) -> tuple[APIClient, ResourceContainer]:
    """读取配置，返回 (客户端, 资源容器)"""
    config = load_json(args.config)
    if not config or not isinstance(config, dict) or not config.get("api_token"):
        print(f"错误: {args.config} 不存在或缺少 api_token")
        sys.exit(1)

    zone_id = args.zone or config.get("zone_id")
    account_id = args.account or config.get("account_id")
    try:
        if args.zone or (zone_id and not account_id):
            container = ResourceContainer.zone(zone_id)
        else:
            container = ResourceContainer.account(account_id)
    except ResourceContainerError as e:
        print(f"错误: {e} (请配置 account_id / zone_id 或使用 --account / --zone)")
        sys.exit(1)

    client = APIClient(
        config["api_token"],
        endpoint=config.get("api_endpoint", DEFAULT_API_ENDPOINT),
        timeout=config.get("timeout", 30.0),
    )
    return client, container


def build_provider(data: dict) -> IdentityProvider:
    """从 dict 构建 IdentityProvider (会做类型校验)"""
    return IdentityProvider(
        name=data.get("name", ""),
        type=data.get("type", ""),
        config=ProviderConfiguration.from_dict(data.get("config") or {}),
        scim_config=ScimConfiguration.from_dict(data.get("scim_config") or {}),
    )


def provider_to_dict(provider: IdentityProvider) -> dict:
    """IdentityProvider 转 dict"""
    d = provider.to_dict()
    d["id"] = provider.id
    return d


def print_provider(provider: IdentityProvider):
    print(json.dumps(provider_to_dict(provider), indent=2, ensure_ascii=False))


# ========== 命令 ==========

def cmd_list(args):
    client, container = get_client(args)
    try:
        providers, info = client.identity_providers.list_identity_providers(
            container, PaginationOptions(page=args.page, per_page=args.per_page)
        )
    except APIClientError as e:
        print(f"✗ {e}")
        return 1
    finally:
        client.close()

    if args.format == "json":
        print(json.dumps([provider_to_dict(p) for p in providers], indent=2, ensure_ascii=False))
    else:
        print(f"{container} 共 {len(providers)} 个 identity provider:\n")
        for p in providers:
            scim = " [scim]" if p.scim_config.enabled else ""
            print(f"  {p.name} ({p.type}) [id: {p.id}]{scim}")
        if args.page or args.per_page:
            print(f"\n第 {info.page}/{info.total_pages} 页，共 {info.total_count} 条")
    return 0


def cmd_get(args):
    client, container = get_client(args)
    try:
        provider = client.identity_providers.get_identity_provider(container, args.provider_id)
        print_provider(provider)
        return 0
    except APIClientError as e:
        print(f"✗ {e}")
        return 1
    finally:
        client.close()


def cmd_create(args):
    client, container = get_client(args)
    data = load_json(args.file)
    items = data if isinstance(data, list) else [data]
    has_error = False
    for item in items:
        if not isinstance(item, dict):
            print(f"✗ 不是 identity provider 对象: {item!r}")
            has_error = True
            continue
        try:
            provider = build_provider(item)
            result = client.identity_providers.create_identity_provider(container, provider)
            print(f"✓ 创建: {result.name} ({result.type}) [id: {result.id}]")
        except (APIClientError, IdentityProviderValidationError, TypeError) as e:
            print(f"✗ {item.get('name', '?')}: {e}")
            has_error = True
    client.close()
    return 1 if has_error else 0


def cmd_update(args):
    client, container = get_client(args)
    data = load_json(args.file)
    try:
        if not isinstance(data, dict) or not data:
            raise ValueError(f"{args.file} 不存在或不是单个 identity provider")
        provider = build_provider(data)
        result = client.identity_providers.update_identity_provider(
            container, args.provider_id, provider
        )
        print(f"✓ 更新: {result.name} ({result.type}) [id: {result.id}]")
        return 0
    except (APIClientError, ValueError, TypeError) as e:
        print(f"✗ {e}")
        return 1
    finally:
        client.close()


def cmd_delete(args):
    client, container = get_client(args)
    try:
        deleted = client.identity_providers.delete_identity_provider(container, args.provider_id)
        print(f"✓ 删除: {deleted.name or args.provider_id} [id: {deleted.id or args.provider_id}]")
        return 0
    except APIClientError as e:
        print(f"✗ {e}")
        return 1
    finally:
        client.close()


# ========== 主函数 ==========

def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog='idp-cli', description='Access Identity Provider CLI')
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE, help=f'配置文件，默认 {DEFAULT_CONFIG_FILE}')
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument('--account', help='account ID (覆盖配置)')
    scope.add_argument('--zone', help='zone ID (覆盖配置)')
    parser.add_argument('-v', '--verbose', action='store_true', help='输出请求日志')
    subparsers = parser.add_subparsers(dest='command', help='命令')

    p = subparsers.add_parser('list', help='列出 identity provider')
    p.add_argument('--page', type=int, default=0, help='页码 (不设置则自动翻页)')
    p.add_argument('--per-page', type=int, default=0, help='每页数量')
    p.add_argument('--format', choices=['table', 'json'], default='table')
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser('get', help='获取 identity provider')
    p.add_argument('provider_id')
    p.set_defaults(func=cmd_get)

    p = subparsers.add_parser('create', help='创建 identity provider')
    p.add_argument('file', help='JSON 文件 (单个或数组)')
    p.set_defaults(func=cmd_create)

    p = subparsers.add_parser('update', help='更新 identity provider (整体替换)')
    p.add_argument('provider_id')
    p.add_argument('file', help='JSON 文件')
    p.set_defaults(func=cmd_update)

    p = subparsers.add_parser('delete', help='删除 identity provider')
    p.add_argument('provider_id')
    p.set_defaults(func=cmd_delete)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
