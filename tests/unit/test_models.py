"""
Tests for request/response models and the pre-dispatch schema validator.
"""

import pytest
from pydantic import ValidationError
from telegraphkit.api.models import (
    CreateAccountRequest,
    CreatePageRequest,
    EditAccountInfoRequest,
    EditPageRequest,
    GetAccountInfoRequest,
    GetPageListRequest,
    GetViewsRequest,
    Page,
)
from telegraphkit.api.validation import PASSED, ModelSchemaValidator, SchemaValidator
from telegraphkit.content.nodes import ElementNode, TextNode


@pytest.mark.unit
class TestRequestModels:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"short_name": ""},
            {"short_name": "x" * 33},
            {"short_name": "ok", "author_name": "x" * 129},
            {"short_name": "ok", "author_url": "not a url"},
            {"short_name": "ok", "unexpected": True},
        ],
    )
    def test_create_account_rules(self, kwargs):
        with pytest.raises(ValidationError):
            CreateAccountRequest(**kwargs)

    def test_optional_fields_omitted_from_body(self):
        request = CreateAccountRequest(short_name="Sandbox", author_name="Anon")
        assert request.model_dump(mode="json", exclude_none=True) == {"short_name": "Sandbox", "author_name": "Anon"}

    def test_edit_account_requires_token(self):
        with pytest.raises(ValidationError):
            EditAccountInfoRequest(access_token="", short_name="x")
        assert EditAccountInfoRequest(access_token="t").short_name is None

    def test_account_fields_restricted(self):
        assert GetAccountInfoRequest(access_token="t", fields=["short_name", "page_count"]).fields == [
            "short_name",
            "page_count",
        ]
        with pytest.raises(ValidationError):
            GetAccountInfoRequest(access_token="t", fields=["password"])

    def test_page_content_accepts_wire_form(self):
        request = CreatePageRequest(
            access_token="t",
            title="Title",
            content=["intro", {"tag": "p", "children": ["body"]}],
        )

        assert request.content == (TextNode("intro"), ElementNode("p", children=(TextNode("body"),)))
        assert request.model_dump(mode="json", exclude_none=True)["content"] == [
            "intro",
            {"tag": "p", "children": ["body"]},
        ]

    @pytest.mark.parametrize("content", [[], "text", [{"tag": ""}]])
    def test_page_content_rejected(self, content):
        with pytest.raises(ValidationError):
            CreatePageRequest(access_token="t", title="Title", content=content)

    def test_edit_page_requires_path(self):
        with pytest.raises(ValidationError):
            EditPageRequest(access_token="t", title="T", content=["x"], path="")

    @pytest.mark.parametrize(
        "kwargs",
        [{"year": 1999}, {"month": 13}, {"day": 0}, {"hour": 25}],
    )
    def test_views_ranges(self, kwargs):
        with pytest.raises(ValidationError):
            GetViewsRequest(path="Sample-01-01", **kwargs)

    def test_page_list_limit(self):
        assert GetPageListRequest(access_token="t", limit=200).limit == 200
        with pytest.raises(ValidationError):
            GetPageListRequest(access_token="t", limit=201)

    def test_assignment_is_validated(self):
        request = CreateAccountRequest(short_name="ok")
        with pytest.raises(ValidationError):
            request.short_name = ""


@pytest.mark.unit
class TestResponseModels:
    def test_page_decodes_content(self):
        page = Page.model_validate(
            {
                "path": "Sample-01-01",
                "url": "https://telegra.ph/Sample-01-01",
                "title": "Sample",
                "content": [{"tag": "p", "children": ["hi"]}],
                "views": 4,
                "unknown": "ignored",
            }
        )

        assert page.content == (ElementNode("p", children=(TextNode("hi"),)),)
        assert page.views == 4
        assert page.description == ""

    def test_page_without_content(self):
        page = Page.model_validate({"path": "p", "url": "u", "title": "t"})
        assert page.content is None


@pytest.mark.unit
class TestModelSchemaValidator:
    def test_conforms_to_protocol(self):
        assert isinstance(ModelSchemaValidator(), SchemaValidator)

    def test_valid_request_passes(self):
        assert ModelSchemaValidator().validate(CreateAccountRequest(short_name="ok")) == PASSED

    def test_unvalidated_instance_is_caught(self):
        verdict = ModelSchemaValidator().validate(CreateAccountRequest.model_construct(short_name=""))

        assert not verdict.ok
        assert verdict.reason.startswith("short_name: ")

    def test_custom_validator_message_is_unwrapped(self):
        request = CreatePageRequest.model_construct(access_token="t", title="T", content=())
        verdict = ModelSchemaValidator().validate(request)

        assert verdict.reason == "content: content is required"

    def test_missing_required_field(self):
        verdict = ModelSchemaValidator().validate(GetViewsRequest.model_construct())
        assert "path" in verdict.reason

    def test_non_model_rejected(self):
        verdict = ModelSchemaValidator().validate({"short_name": "ok"})
        assert verdict.reason == "unsupported request type: dict"
