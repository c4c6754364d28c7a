from .client import TelegraphClient
from .models import (
    Account,
    CreateAccountRequest,
    CreatePageRequest,
    EditAccountInfoRequest,
    EditPageRequest,
    GetAccountInfoRequest,
    GetPageListRequest,
    GetPageRequest,
    GetViewsRequest,
    Page,
    PageList,
    PageViews,
)
from .validation import ModelSchemaValidator, SchemaValidator, ValidationResult

__all__ = [
    "Account",
    "CreateAccountRequest",
    "CreatePageRequest",
    "EditAccountInfoRequest",
    "EditPageRequest",
    "GetAccountInfoRequest",
    "GetPageListRequest",
    "GetPageRequest",
    "GetViewsRequest",
    "ModelSchemaValidator",
    "Page",
    "PageList",
    "PageViews",
    "SchemaValidator",
    "TelegraphClient",
    "ValidationResult",
]
