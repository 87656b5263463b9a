from __future__ import annotations

import pytest

from ai_writer.platforms import PlatformApiError, PublishOptions, PublishResult, PublishStatus
from ai_writer.utils.html import html_to_text


def test_options_from_mapping() -> None:
    options = PublishOptions.from_mapping(
        {"status": "PUBLISH", "title": "  ", "tags": "ai, tools,", "categories": ["3"], "topic": "AI"}
    )
    assert options.status is PublishStatus.PUBLISH
    assert options.is_publish
    assert options.title is None
    assert options.tags == ("ai", "tools")
    assert options.categories == ("3",)
    assert options.extra == {"topic": "AI"}


def test_options_default_to_draft() -> None:
    assert PublishOptions.from_mapping({}) == PublishOptions()
    assert PublishOptions.from_mapping(None).status is PublishStatus.DRAFT


def test_options_reject_unknown_status() -> None:
    with pytest.raises(ValueError, match="later"):
        PublishOptions.from_mapping({"status": "later"})


def test_result_as_dict_drops_empty_fields() -> None:
    result = PublishResult.failed("CSDN", error="boom")
    assert result.as_dict() == {"platform": "CSDN", "success": False, "error": "boom"}
    assert not result.needs_manual_action


def test_api_error_renders_details() -> None:
    error = PlatformApiError("rejected", details={"code": 7})
    assert str(error) == 'rejected | details: {"code": 7}'
    assert str(PlatformApiError("plain")) == "plain"


def test_html_to_text_prefers_article_body() -> None:
    page = (
        "<html><head><script>var x = 1;</script></head><body>"
        "<nav>Menu</nav><article><h1>Title</h1><p>First</p><p>Second</p></article>"
        "<footer>Footer</footer></body></html>"
    )
    assert html_to_text(page) == "Title\nFirst\nSecond"
