import pytest

from access_idp import (
    IdentityProvider,
    IdentityProviderListResponse,
    IdentityProviderResponse,
    IdentityProviderValidationError,
    ProviderConfiguration,
    ProviderType,
    ScimConfiguration,
)


def test_decode_okta_provider() -> None:
    body = {
        "result": {
            "id": "idp123",
            "name": "Okta",
            "type": "okta",
            "config": {"okta_account": "https://x.okta.com"},
            "scim_config": {},
        }
    }
    provider = IdentityProviderResponse.from_dict(body).result
    assert provider.id == "idp123"
    assert provider.name == "Okta"
    assert provider.type == "okta"
    assert provider.provider_type is ProviderType.OKTA
    assert provider.config.okta_account == "https://x.okta.com"
    assert provider.config.client_id is None
    assert provider.scim_config == ScimConfiguration()


def test_round_trip_keeps_pkce_tri_state() -> None:
    for pkce in (None, True, False):
        provider = IdentityProvider(
            name="Corp OIDC",
            type="oidc",
            config=ProviderConfiguration(
                client_id="cid",
                client_secret="secret",
                auth_url="https://idp.example.com/auth",
                token_url="https://idp.example.com/token",
                certs_url="https://idp.example.com/certs",
                scopes=["openid", "email"],
                pkce_enabled=pkce,
            ),
            scim_config=ScimConfiguration(enabled=True, secret="s", user_deprovision=True),
        )
        wire = provider.to_dict()
        if pkce is None:
            assert "pkce_enabled" not in wire["config"]
        else:
            assert wire["config"]["pkce_enabled"] is pkce
        assert IdentityProvider.from_dict(wire) == provider


def test_to_dict_omits_empty_fields() -> None:
    provider = IdentityProvider(name="PIN", type="onetimepin")
    assert provider.to_dict() == {
        "name": "PIN",
        "type": "onetimepin",
        "config": {},
        "scim_config": {},
    }


def test_false_flags_are_omitted() -> None:
    config = ProviderConfiguration(issuer_url="https://saml.example.com", sign_request=False)
    scim = ScimConfiguration(enabled=False, seat_deprovision=True)
    assert config.to_dict() == {"issuer_url": "https://saml.example.com"}
    assert scim.to_dict() == {"seat_deprovision": True}


def test_server_id_is_emitted_when_present() -> None:
    provider = IdentityProvider.from_dict({"id": "abc", "name": "GH", "type": "github"})
    assert provider.to_dict()["id"] == "abc"
    assert provider.to_dict()["config"] == {}


def test_name_and_type_required() -> None:
    with pytest.raises(IdentityProviderValidationError):
        IdentityProvider(name="", type="github")
    with pytest.raises(IdentityProviderValidationError):
        IdentityProvider(name="GitHub", type="")


def test_unrelated_config_fields_rejected_for_known_type() -> None:
    with pytest.raises(IdentityProviderValidationError) as exc:
        IdentityProvider(
            name="GitHub",
            type="github",
            config=ProviderConfiguration(client_id="cid", okta_account="https://x.okta.com"),
        )
    assert "okta_account" in str(exc.value)


def test_unknown_type_is_not_checked() -> None:
    provider = IdentityProvider(
        name="New",
        type="some-future-idp",
        config=ProviderConfiguration(okta_account="https://x.okta.com", sign_request=True),
    )
    assert provider.provider_type is None
    assert provider.config.unrelated_fields(provider.type) == []


def test_from_dict_skips_validation() -> None:
    provider = IdentityProvider.from_dict(
        {"id": "x", "name": "GitHub", "type": "github", "config": {"okta_account": "a"}}
    )
    assert provider.config.okta_account == "a"
    assert provider.config.unrelated_fields(ProviderType.GITHUB) == ["okta_account"]


def test_missing_result_is_a_decode_failure() -> None:
    with pytest.raises(ValueError):
        IdentityProviderResponse.from_dict({"success": True})


def test_mistyped_fields_are_rejected() -> None:
    with pytest.raises(TypeError):
        IdentityProviderResponse.from_dict({"result": ["not", "an", "object"]})
    with pytest.raises(TypeError):
        IdentityProvider.from_dict({"name": 42, "type": "okta"})
    with pytest.raises(TypeError):
        ProviderConfiguration.from_dict({"scopes": "openid"})
    with pytest.raises(TypeError):
        ProviderConfiguration.from_dict({"pkce_enabled": "yes"})


def test_list_response_with_null_result() -> None:
    response = IdentityProviderListResponse.from_dict({"success": True, "result": None})
    assert response.result == []
    assert response.result_info is None


def test_list_response_parses_result_info_and_errors() -> None:
    response = IdentityProviderListResponse.from_dict(
        {
            "success": True,
            "errors": [],
            "messages": [{"code": 1000, "message": "ok"}],
            "result": [{"id": "a", "name": "A", "type": "google"}],
            "result_info": {"page": 2, "per_page": 1, "count": 1, "total_pages": 3, "total_count": 3},
        }
    )
    assert [p.id for p in response.result] == ["a"]
    assert response.result_info.page == 2
    assert response.result_info.total_pages == 3
    assert str(response.messages[0]) == "[1000] ok"
