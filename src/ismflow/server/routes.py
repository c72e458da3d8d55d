"""托管索引 HTTP 路由.

把网关操作暴露为管理界面调用的 REST 接口。所有接口都返回 HTTP 200 与
ServerResponse 包装（{"ok": true, "response": ...} 或 {"ok": false, "error": ...}），
由前端根据 ok 字段判断结果。
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import APIRouter, FastAPI, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from ..connection import ClusterClientFactory
from ..managed_indices import GatewayRequest, ManagedIndexService, ManagedIndexSettings

DEFAULT_PREFIX = "/api/ism"


class RetryBody(BaseModel):
    """重试请求体."""

    index: list[str]
    state: str | None = None


class ChangePolicyBody(BaseModel):
    """更换策略请求体."""

    model_config = ConfigDict(populate_by_name=True)

    indices: list[str]
    policy_id: str = Field(alias="policyId")
    include: list[dict[str, Any]] = Field(default_factory=list)
    state: str | None = None


class RemovePolicyBody(BaseModel):
    """移除策略请求体."""

    indices: list[str]


def _gateway_request(
    request: Request,
    params: dict[str, str] | None = None,
    query: dict[str, Any] | None = None,
    payload: Any = None,
) -> GatewayRequest:
    return GatewayRequest(
        params=params or {},
        query=query or {},
        payload=payload,
        headers=dict(request.headers),
    )


def create_router(
    service: ManagedIndexService, prefix: str = DEFAULT_PREFIX
) -> APIRouter:
    """创建托管索引路由.

    Args:
        service: 托管索引网关
        prefix: 路由前缀

    Returns:
        APIRouter 实例
    """
    router = APIRouter(prefix=prefix, tags=["managed-indices"])

    @router.get("/managedIndices")
    def get_managed_indices(
        request: Request,
        from_: Annotated[int, Query(alias="from", ge=0)] = 0,
        size: Annotated[int | None, Query(ge=0)] = None,
        search: str = "",
        sort_field: Annotated[str | None, Query(alias="sortField")] = None,
        sort_direction: Annotated[str, Query(alias="sortDirection")] = "desc",
    ) -> dict[str, Any]:
        query = {
            "from": from_,
            "size": size,
            "search": search,
            "sortField": sort_field,
            "sortDirection": sort_direction,
        }
        result = service.get_managed_indices(_gateway_request(request, query=query))
        return result.to_dict()

    @router.get("/managedIndices/{id}")
    def get_managed_index(id: str, request: Request) -> dict[str, Any]:  # noqa: A002
        result = service.get_managed_index(
            _gateway_request(request, params={"id": id})
        )
        return result.to_dict()

    @router.post("/retry")
    def retry_managed_index_policy(
        body: RetryBody, request: Request
    ) -> dict[str, Any]:
        result = service.retry_managed_index_policy(
            _gateway_request(request, payload=body.model_dump())
        )
        return result.to_dict()

    @router.post("/changePolicy")
    def change_policy(body: ChangePolicyBody, request: Request) -> dict[str, Any]:
        result = service.change_policy(
            _gateway_request(request, payload=body.model_dump(by_alias=True))
        )
        return result.to_dict()

    @router.post("/removePolicy")
    def remove_policy(body: RemovePolicyBody, request: Request) -> dict[str, Any]:
        result = service.remove_policy(
            _gateway_request(request, payload=body.model_dump())
        )
        return result.to_dict()

    return router


def create_app(
    factory: ClusterClientFactory,
    settings: ManagedIndexSettings | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> FastAPI:
    """创建挂载托管索引路由的 FastAPI 应用，应用关闭时释放集群客户端."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        factory.close_all()

    app = FastAPI(title="ismflow", lifespan=lifespan)
    app.include_router(create_router(ManagedIndexService(factory, settings), prefix))
    return app
