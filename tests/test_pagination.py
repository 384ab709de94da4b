import pytest

from access_idp import (
    PaginationOptions,
    ResourceContainer,
    ResourceContainerError,
    ResultInfo,
    RouteLevel,
)
from access_idp.pagination import build_uri


def test_auto_paginate_only_without_page_and_per_page() -> None:
    assert PaginationOptions().auto_paginate
    assert not PaginationOptions(page=2).auto_paginate
    assert not PaginationOptions(per_page=10).auto_paginate


def test_with_defaults() -> None:
    assert PaginationOptions().with_defaults() == PaginationOptions(page=1, per_page=25)
    assert PaginationOptions(page=3).with_defaults() == PaginationOptions(page=3, per_page=25)
    assert PaginationOptions(per_page=5).with_defaults() == PaginationOptions(page=1, per_page=5)


def test_result_info_next_and_done() -> None:
    info = ResultInfo(page=1, per_page=25, total_pages=2)
    assert info.has_more_pages()
    second = info.next()
    assert second.page == 2
    assert not second.done()
    assert second.next().done()


def test_empty_collection_is_done_after_first_page() -> None:
    assert ResultInfo(page=1, per_page=25, total_pages=0).next().done()


def test_result_info_from_dict_rejects_non_integers() -> None:
    with pytest.raises(TypeError):
        ResultInfo.from_dict({"page": "1"})


def test_build_uri() -> None:
    assert build_uri("/x", ResultInfo()) == "/x"
    assert build_uri("/x", ResultInfo(page=2, per_page=10)) == "/x?page=2&per_page=10"


def test_resource_container_paths() -> None:
    assert ResourceContainer.account("acct1").base_path() == "/accounts/acct1"
    assert ResourceContainer.zone("zone1").base_path() == "/zones/zone1"
    assert ResourceContainer("zones", "z").level is RouteLevel.ZONE


def test_resource_container_validation() -> None:
    with pytest.raises(ResourceContainerError):
        ResourceContainer.account("")
    with pytest.raises(ResourceContainerError):
        ResourceContainer("user", "u1")
