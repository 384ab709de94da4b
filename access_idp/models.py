"""
Access Identity Provider 数据模型

字段名严格对应 API 的 JSON 格式：
https://developers.cloudflare.com/api/operations/access-identity-providers-list-access-identity-providers

说明：
- config 是所有身份提供商配置字段的并集，只有和 type 相关的字段才有意义
- pkce_enabled 区分 "未设置" 和 false
- 响应统一包在 {"success", "errors", "messages", "result"} 信封中
"""

from dataclasses import dataclass, field, fields
from enum import Enum

from .pagination import ResultInfo


class IdentityProviderValidationError(ValueError):
    """Identity Provider 数据验证错误"""
    pass


# ============ 字段解析 ============

def _expect_dict(data, name: str) -> dict:
    if not isinstance(data, dict):
        raise TypeError(f"{name} 应为 object, 实际为 {type(data).__name__}")
    return data


def _get_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} 应为字符串: {value!r}")
    return value


def _get_bool(data: dict, key: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise TypeError(f"{key} 应为布尔值: {value!r}")
    return value


def _get_str_list(data: dict, key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{key} 应为字符串数组: {value!r}")
    return value


# ============ 身份提供商类型 ============

class ProviderType(str, Enum):
    """
    已知的身份提供商类型

    type 在 API 中是开放字符串，新的类型可能先于客户端出现，
    因此 IdentityProvider.type 仍然保存原始字符串。
    """
    ONETIMEPIN = "onetimepin"
    AZURE_AD = "azureAD"
    CENTRIFY = "centrify"
    FACEBOOK = "facebook"
    GITHUB = "github"
    GOOGLE = "google"
    GOOGLE_APPS = "google-apps"
    LINKEDIN = "linkedin"
    OIDC = "oidc"
    OKTA = "okta"
    ONELOGIN = "onelogin"
    PINGONE = "pingone"
    SAML = "saml"
    YANDEX = "yandex"

    @classmethod
    def lookup(cls, value: str) -> "ProviderType | None":
        try:
            return cls(value)
        except ValueError:
            return None


# redirect_url 由服务端回填，所有类型都可能带
_COMMON_FIELDS = frozenset({"redirect_url"})
_OAUTH_FIELDS = frozenset({"client_id", "client_secret"})
_OAUTH_CLAIM_FIELDS = _OAUTH_FIELDS | {"claims", "email_attribute_name"}

PROVIDER_CONFIG_FIELDS: dict[ProviderType, frozenset[str]] = {
    ProviderType.ONETIMEPIN: _COMMON_FIELDS,
    ProviderType.AZURE_AD: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {"directory_id", "support_groups"},
    ProviderType.CENTRIFY: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {"centrify_account", "centrify_app_id"},
    ProviderType.FACEBOOK: _COMMON_FIELDS | _OAUTH_FIELDS,
    ProviderType.GITHUB: _COMMON_FIELDS | _OAUTH_FIELDS,
    ProviderType.GOOGLE: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS,
    ProviderType.GOOGLE_APPS: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {"apps_domain"},
    ProviderType.LINKEDIN: _COMMON_FIELDS | _OAUTH_FIELDS,
    ProviderType.OIDC: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {
        "auth_url", "token_url", "certs_url", "scopes", "pkce_enabled",
    },
    ProviderType.OKTA: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {"okta_account", "api_token"},
    ProviderType.ONELOGIN: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS | {"onelogin_account"},
    ProviderType.PINGONE: _COMMON_FIELDS | _OAUTH_CLAIM_FIELDS,
    ProviderType.SAML: _COMMON_FIELDS | {
        "issuer_url", "sso_target_url", "attributes", "email_attribute_name",
        "idp_public_cert", "sign_request",
    },
    ProviderType.YANDEX: _COMMON_FIELDS | _OAUTH_FIELDS,
}


# ============ 配置 ============

@dataclass
class ProviderConfiguration:
    """
    身份提供商配置 (config)

    所有类型的字段放在同一个结构里，序列化时省略空值：
    - 字符串 / 数组: None 或空值不输出
    - sign_request / support_groups: 只有 True 才输出
    - pkce_enabled: None 不输出，False 输出 false
    """
    api_token: str | None = None
    apps_domain: str | None = None
    attributes: list[str] | None = None
    auth_url: str | None = None
    centrify_account: str | None = None
    centrify_app_id: str | None = None
    certs_url: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    claims: list[str] | None = None
    scopes: list[str] | None = None
    directory_id: str | None = None
    email_attribute_name: str | None = None
    idp_public_cert: str | None = None
    issuer_url: str | None = None
    okta_account: str | None = None
    onelogin_account: str | None = None
    redirect_url: str | None = None
    sign_request: bool = False
    sso_target_url: str | None = None
    support_groups: bool = False
    token_url: str | None = None
    pkce_enabled: bool | None = None

    _FLAGS = ("sign_request", "support_groups")
    _LISTS = ("attributes", "claims", "scopes")

    def to_dict(self) -> dict:
        """只返回有值的字段"""
        d = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "pkce_enabled":
                if value is not None:
                    d[f.name] = value
            elif f.name in self._FLAGS:
                if value:
                    d[f.name] = True
            elif value:
                d[f.name] = list(value) if f.name in self._LISTS else value
        return d

    def populated_fields(self) -> list[str]:
        """有值的字段名 (wire 名称)"""
        return list(self.to_dict())

    def unrelated_fields(self, provider_type: ProviderType | str) -> list[str]:
        """
        返回和 provider_type 无关却被设置的字段

        未知类型不做检查，返回空列表。
        """
        if not isinstance(provider_type, ProviderType):
            provider_type = ProviderType.lookup(provider_type)
        if provider_type is None:
            return []
        allowed = PROVIDER_CONFIG_FIELDS[provider_type]
        return [name for name in self.populated_fields() if name not in allowed]

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderConfiguration":
        data = _expect_dict(data, "config")
        kwargs = {}
        for f in fields(cls):
            if f.name in cls._FLAGS:
                kwargs[f.name] = bool(_get_bool(data, f.name))
            elif f.name == "pkce_enabled":
                kwargs[f.name] = _get_bool(data, f.name)
            elif f.name in cls._LISTS:
                kwargs[f.name] = _get_str_list(data, f.name)
            else:
                kwargs[f.name] = _get_str(data, f.name)
        return cls(**kwargs)


@dataclass
class ScimConfiguration:
    """
    SCIM 预配配置 (scim_config)

    deprovision 开关控制身份提供商删除用户 / 席位 / 组成员时是否同步删除。
    """
    enabled: bool = False
    secret: str | None = None
    user_deprovision: bool = False
    seat_deprovision: bool = False
    group_member_deprovision: bool = False

    def to_dict(self) -> dict:
        d = {}
        if self.enabled:
            d["enabled"] = True
        if self.secret:
            d["secret"] = self.secret
        if self.user_deprovision:
            d["user_deprovision"] = True
        if self.seat_deprovision:
            d["seat_deprovision"] = True
        if self.group_member_deprovision:
            d["group_member_deprovision"] = True
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "ScimConfiguration":
        data = _expect_dict(data, "scim_config")
        return cls(
            enabled=bool(_get_bool(data, "enabled")),
            secret=_get_str(data, "secret"),
            user_deprovision=bool(_get_bool(data, "user_deprovision")),
            seat_deprovision=bool(_get_bool(data, "seat_deprovision")),
            group_member_deprovision=bool(_get_bool(data, "group_member_deprovision")),
        )


# ============ Identity Provider 资源 ============

@dataclass
class IdentityProvider:
    """
    Access Identity Provider 资源

    - id: 服务端分配，创建时为空
    - type: 开放字符串 (oidc, saml, github ...)
    - config / scim_config: 序列化时总是输出，即使为空
    """
    name: str
    type: str
    id: str | None = None
    config: ProviderConfiguration = field(default_factory=ProviderConfiguration)
    scim_config: ScimConfiguration = field(default_factory=ScimConfiguration)

    # 内部标记，跳过验证（用于 from_dict）
    _skip_validation: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self):
        """验证必填字段和 config 与 type 的对应关系"""
        if self._skip_validation:
            return
        if not self.name:
            raise IdentityProviderValidationError("name 是必填字段")
        if not self.type:
            raise IdentityProviderValidationError("type 是必填字段")
        unrelated = self.config.unrelated_fields(self.type)
        if unrelated:
            raise IdentityProviderValidationError(
                f"{self.type} 类型不支持以下 config 字段: {', '.join(unrelated)}"
            )

    @property
    def provider_type(self) -> ProviderType | None:
        """已知类型返回 ProviderType，未知类型返回 None"""
        return ProviderType.lookup(self.type)

    def to_dict(self) -> dict:
        """转换为 API 请求格式"""
        d: dict = {}
        if self.id:
            d["id"] = self.id
        d["name"] = self.name
        d["type"] = self.type
        d["config"] = self.config.to_dict()
        d["scim_config"] = self.scim_config.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "IdentityProvider":
        """从 API 响应解析"""
        data = _expect_dict(data, "identity provider")
        config = data.get("config")
        scim_config = data.get("scim_config")
        return cls(
            id=_get_str(data, "id") or None,
            name=_get_str(data, "name") or "",
            type=_get_str(data, "type") or "",
            config=ProviderConfiguration.from_dict(config) if config is not None else ProviderConfiguration(),
            scim_config=ScimConfiguration.from_dict(scim_config) if scim_config is not None else ScimConfiguration(),
            _skip_validation=True,  # API 响应不验证
        )


# ============ 响应类型 ============

@dataclass
class ResponseInfo:
    """errors / messages 中的单条信息"""
    code: int = 0
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ResponseInfo":
        data = _expect_dict(data, "response info")
        code = data.get("code", 0)
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError(f"code 应为整数: {code!r}")
        return cls(code=code, message=_get_str(data, "message") or "")

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


def _parse_infos(data: dict, key: str) -> list[ResponseInfo]:
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeError(f"{key} 应为数组: {items!r}")
    return [ResponseInfo.from_dict(i) for i in items]


@dataclass
class IdentityProviderResponse:
    """单个 Identity Provider 的响应"""
    result: IdentityProvider
    success: bool = True
    errors: list[ResponseInfo] = field(default_factory=list)
    messages: list[ResponseInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "IdentityProviderResponse":
        data = _expect_dict(data, "response")
        if "result" not in data:
            raise ValueError("响应缺少 result 字段")
        success = _get_bool(data, "success")
        return cls(
            result=IdentityProvider.from_dict(data["result"]),
            success=True if success is None else success,
            errors=_parse_infos(data, "errors"),
            messages=_parse_infos(data, "messages"),
        )


@dataclass
class IdentityProviderListResponse:
    """
    Identity Provider 列表响应

    result_info 缺失时为 None，表示没有更多分页信息
    """
    result: list[IdentityProvider]
    result_info: ResultInfo | None = None
    success: bool = True
    errors: list[ResponseInfo] = field(default_factory=list)
    messages: list[ResponseInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "IdentityProviderListResponse":
        data = _expect_dict(data, "response")
        if "result" not in data:
            raise ValueError("响应缺少 result 字段")
        items = data["result"]
        if items is None:
            items = []
        if not isinstance(items, list):
            raise TypeError(f"result 应为数组, 实际为 {type(items).__name__}")

        result_info = None
        if data.get("result_info") is not None:
            result_info = ResultInfo.from_dict(data["result_info"])

        success = _get_bool(data, "success")
        return cls(
            result=[IdentityProvider.from_dict(i) for i in items],
            result_info=result_info,
            success=True if success is None else success,
            errors=_parse_infos(data, "errors"),
            messages=_parse_infos(data, "messages"),
        )
