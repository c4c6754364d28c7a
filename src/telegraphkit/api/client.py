"""
Async Telegraph API client.

Basic usage::

    async with TelegraphClient() as client:
        account = await client.create_account(
            CreateAccountRequest(short_name="MyBlog", author_name="Jane Doe")
        )
        page = await client.create_page(
            CreatePageRequest(
                access_token=account.access_token,
                title="My First Article",
                content=ContentBuilder().add_paragraph("Hello, World!").build(),
            )
        )
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

import aiohttp
import structlog
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from telegraphkit.api.models import (
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
from telegraphkit.api.validation import ModelSchemaValidator, SchemaValidator
from telegraphkit.config.config import ClientConfig
from telegraphkit.content.converter import ConversionOverrides, MarkupConverter
from telegraphkit.errors import RequestValidationError, SerializationError
from telegraphkit.transport.dispatcher import ResilientDispatcher
from telegraphkit.transport.rate_limiter import TokenBucket
from telegraphkit.transport.unifier import unify

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class TelegraphClient:
    """Typed, rate-limited, retrying client for the Telegraph API."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        validator: Optional[SchemaValidator] = None,
        converter: Optional[MarkupConverter] = None,
    ):
        self.config = config or ClientConfig()
        self.validator: SchemaValidator = validator or ModelSchemaValidator()
        self.converter = converter or MarkupConverter()

        # Shared by every call made through this client
        self.limiter = TokenBucket(
            rate=self.config.rate_limit.requests_per_second,
            capacity=self.config.rate_limit.capacity,
        )

        self.session = session
        self._owns_session = session is None
        self._dispatcher: Optional[ResilientDispatcher] = None

        logger.info(
            "Telegraph client created",
            base_url=self.config.base_url,
            max_retries=self.config.retry.max_retries,
            requests_per_second=self.config.rate_limit.requests_per_second,
            burst=self.config.rate_limit.capacity,
        )

    @property
    def is_initialized(self) -> bool:
        return self._dispatcher is not None

    async def initialize(self) -> None:
        """Open the HTTP session (unless one was supplied) and build the dispatcher."""
        if self._dispatcher is not None:
            return
        if self.session is None:
            self.session = aiohttp.ClientSession()
        self._dispatcher = ResilientDispatcher(
            self.session,
            self.config.base_url,
            retry=self.config.retry,
            limiter=self.limiter,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
        )
        logger.debug("Telegraph client session ready", owns_session=self._owns_session)

    async def close(self) -> None:
        """Close the session if this client opened it."""
        self.limiter.close()
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None
        self._dispatcher = None
        logger.info("Telegraph client closed")

    async def __aenter__(self) -> TelegraphClient:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _check(self, request: Any) -> None:
        verdict = self.validator.validate(request)
        if not verdict.ok:
            logger.warning("Request rejected by schema validator", request=type(request).__name__, reason=verdict.reason)
            raise RequestValidationError(verdict.reason)

    def _dispatcher_or_raise(self) -> ResilientDispatcher:
        if self._dispatcher is None:
            raise RuntimeError("Telegraph client not initialized. Call initialize() first.")
        return self._dispatcher

    @staticmethod
    def _body(request: BaseModel) -> Dict[str, Any]:
        try:
            return request.model_dump(mode="json", exclude_none=True)
        except PydanticSerializationError as exc:
            raise SerializationError(f"failed to marshal {type(request).__name__}: {exc}") from exc

    async def _post(
        self,
        path: str,
        request: BaseModel,
        result_type: Type[T],
        timeout: Optional[float],
    ) -> Optional[T]:
        self._check(request)
        dispatcher = self._dispatcher_or_raise()
        response = await dispatcher.dispatch("POST", path, self._body(request), timeout=timeout)
        return unify(response, result_type)

    async def create_account(
        self, request: CreateAccountRequest, *, timeout: Optional[float] = None
    ) -> Optional[Account]:
        """
        Create a new Telegraph account.

        Most users need only one account; channel administrators may want one
        per channel to keep separate author names and profile links.
        """
        return await self._post("/createAccount", request, Account, timeout)

    async def edit_account_info(
        self, request: EditAccountInfoRequest, *, timeout: Optional[float] = None
    ) -> Optional[Account]:
        """Update account information. Only the fields that are set are sent."""
        return await self._post("/editAccountInfo", request, Account, timeout)

    async def get_account_info(
        self, request: GetAccountInfoRequest, *, timeout: Optional[float] = None
    ) -> Optional[Account]:
        return await self._post("/getAccountInfo", request, Account, timeout)

    async def create_page(self, request: CreatePageRequest, *, timeout: Optional[float] = None) -> Optional[Page]:
        return await self._post("/createPage", request, Page, timeout)

    async def edit_page(self, request: EditPageRequest, *, timeout: Optional[float] = None) -> Optional[Page]:
        return await self._post("/editPage", request, Page, timeout)

    async def get_page(self, request: GetPageRequest, *, timeout: Optional[float] = None) -> Optional[Page]:
        """Fetch a page by path. This is the one lookup sent as GET with query parameters."""
        self._check(request)
        dispatcher = self._dispatcher_or_raise()

        params = {"path": request.path}
        if request.return_content:
            params["return_content"] = "true"

        response = await dispatcher.dispatch("GET", "/getPage", params=params, timeout=timeout)
        return unify(response, Page)

    async def get_page_list(
        self, request: GetPageListRequest, *, timeout: Optional[float] = None
    ) -> Optional[PageList]:
        return await self._post("/getPageList", request, PageList, timeout)

    async def get_views(self, request: GetViewsRequest, *, timeout: Optional[float] = None) -> Optional[PageViews]:
        return await self._post("/getViews", request, PageViews, timeout)

    def convert_html_to_page(self, markup: str, overrides: Optional[ConversionOverrides] = None) -> Page:
        """
        Convert an HTML document into an unsaved Page.

        No request is made; ``path`` and ``url`` are empty until the page is
        created through :meth:`create_page`.
        """
        converted = self.converter.convert(markup, overrides)
        return Page(
            path="",
            url="",
            title=converted.title,
            description=converted.description,
            author_name=converted.author_name or None,
            author_url=converted.author_url or None,
            content=converted.content,
        )
