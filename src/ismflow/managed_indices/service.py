"""托管索引网关服务.

把 UI 发来的请求转换为对数据集群与 ISM 集群的调用，并把响应整理为 UI 结构。
所有操作都返回 ServerResponse，任何异常都不会越过网关边界。
"""

import logging
from typing import Any, Protocol

from opensearchpy import Q, Search

from ..connection import ClusterClient, ClusterRole
from ..core.constants import SORT_DIRECTIONS, ManagedIndexField
from ..core.utils import build_must_query, build_sort
from .exceptions import RequestValidationError
from .models import (
    GatewayRequest,
    ManagedIndexSettings,
    ManagedIndicesPage,
    PolicyUpdateOutcome,
    ServerResponse,
)
from .transforms import (
    get_total_hits,
    transform_managed_index_hit,
    transform_policy_update_response,
)

logger = logging.getLogger(__name__)

LOG_PREFIX = "Index Management - ManagedIndexService"


class ClusterProvider(Protocol):
    """按角色提供集群客户端的对象，通常是 ClusterClientFactory."""

    def get_cluster(self, role: ClusterRole) -> ClusterClient: ...


def _is_index_not_found(error: Exception) -> bool:
    """判断集群错误是否为 404 index_not_found_exception.

    opensearchpy.TransportError 的 error 为错误类型，info 为响应 body。
    """
    if getattr(error, "status_code", None) != 404:
        return False
    if getattr(error, "error", None) == "index_not_found_exception":
        return True
    body = getattr(error, "info", None)
    if not isinstance(body, dict):
        return False
    error_info = body.get("error")
    return isinstance(error_info, dict) and (
        error_info.get("type") == "index_not_found_exception"
    )


def _parse_int(value: Any, name: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise RequestValidationError(f"{name} 必须是整数，当前值: {value!r}") from e
    if number < 0:
        raise RequestValidationError(f"{name} 必须 >= 0，当前值: {number}")
    return number


def _require_indices(payload: dict[str, Any], key: str) -> list[str]:
    indices = payload.get(key)
    if not isinstance(indices, list) or not indices:
        raise RequestValidationError(f"{key} 必须是非空的索引名称列表")
    if not all(isinstance(index, str) and index for index in indices):
        raise RequestValidationError(f"{key} 中的索引名称必须是非空字符串")
    return indices


def _require_payload(request: GatewayRequest) -> dict[str, Any]:
    if not isinstance(request.payload, dict):
        raise RequestValidationError("请求体必须是 JSON 对象")
    return request.payload


class ManagedIndexService:
    """托管索引网关.

    Args:
        clusters: 按角色提供集群客户端的对象（ClusterClientFactory）
        settings: 网关配置，默认使用 ManagedIndexSettings 的默认值

    Example:
        >>> factory = ClusterClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
        >>> service = ManagedIndexService(factory)
        >>> result = service.get_managed_indices(
        ...     GatewayRequest(query={"from": 0, "size": 20, "search": "logs"})
        ... )
        >>> result.to_dict()["response"]["totalManagedIndices"]
    """

    def __init__(
        self,
        clusters: ClusterProvider,
        settings: ManagedIndexSettings | None = None,
    ):
        if clusters is None:
            raise ValueError("clusters 不能为 None")
        self._clusters = clusters
        self._settings = settings or ManagedIndexSettings()
        logger.info(f"初始化托管索引网关，配置索引: {self._settings.config_index}")

    def get_managed_index(self, request: GatewayRequest) -> ServerResponse[Any]:
        """按文档 ID 获取单个托管索引文档.

        Args:
            request: params["id"] 为配置索引中的文档 ID

        Returns:
            成功时 response 为集群返回的原始文档
        """
        try:
            doc_id = request.params.get("id")
            if not doc_id:
                raise RequestValidationError("id 不能为空")

            params = {"index": self._settings.config_index, "id": doc_id}
            cluster = self._clusters.get_cluster(ClusterRole.DATA)
            result = cluster.call_with_request(request, "get", params)
            return ServerResponse.success(result)
        except Exception as e:
            logger.error(f"{LOG_PREFIX} - getManagedIndex: {e}")
            return ServerResponse.failure(str(e))

    def build_managed_indices_search(
        self,
        from_: int,
        size: int,
        search: str | None,
        sort_field: str | None,
        sort_direction: str,
    ) -> Search:
        """构建配置索引的分页检索.

        只检索带有 managed_index 的文档；search 对 managed_index.name 做模糊匹配；
        sort_field 不在白名单时不排序。

        Returns:
            opensearchpy.Search 对象
        """
        query = (
            Search(index=self._settings.config_index)
            .query(Q(build_must_query(ManagedIndexField.NAME, search)))
            .filter("exists", field=ManagedIndexField.ROOT)
            .extra(seq_no_primary_term=True)
        )

        sorts = build_sort(sort_field, sort_direction, self._settings.sort_fields)
        if sorts:
            query = query.sort(*sorts)

        return query[from_ : from_ + size]

    def get_managed_indices(
        self, request: GatewayRequest
    ) -> ServerResponse[ManagedIndicesPage]:
        """分页列出托管索引，并附带 explain 实时元数据.

        查询参数: from、size、search、sortField、sortDirection。

        配置索引不存在时返回空结果（ok=True），调用方无法区分“配置索引尚未创建”
        与“没有匹配的托管索引”。当前页没有命中时不发起 explain 调用，total 也返回 0。

        Args:
            request: 网关请求

        Returns:
            成功时 response 为 ManagedIndicesPage
        """
        try:
            query = request.query
            from_ = _parse_int(query.get("from"), "from", 0)
            size = _parse_int(query.get("size"), "size", self._settings.default_size)
            sort_field = query.get("sortField")
            sort_direction = str(query.get("sortDirection") or "desc").lower()
            # 只有排序字段在白名单内时才会用到排序方向
            if (
                sort_field in self._settings.sort_fields
                and sort_direction not in SORT_DIRECTIONS
            ):
                raise RequestValidationError(
                    f"sortDirection 必须是 {SORT_DIRECTIONS} 之一，当前值: {sort_direction}"
                )

            search = self.build_managed_indices_search(
                from_=from_,
                size=size,
                search=query.get("search"),
                sort_field=sort_field,
                sort_direction=sort_direction,
            )
            search_params = {
                "index": self._settings.config_index,
                "body": search.to_dict(),
            }

            data_cluster = self._clusters.get_cluster(ClusterRole.DATA)
            search_response = data_cluster.call_with_request(
                request, "search", search_params
            )

            hits = search_response.get("hits", {}).get("hits", [])
            if not hits:
                return ServerResponse.success(ManagedIndicesPage())

            total = get_total_hits(search_response)
            indices = [hit["_source"]["managed_index"]["index"] for hit in hits]

            ism_cluster = self._clusters.get_cluster(ClusterRole.ISM)
            explain_response = ism_cluster.call_with_request(
                request, "ism.explain", {"index": ",".join(indices)}
            )

            managed_indices = [
                transform_managed_index_hit(hit, explain_response or {})
                for hit in hits
            ]
            return ServerResponse.success(
                ManagedIndicesPage(
                    managed_indices=managed_indices,
                    total_managed_indices=total,
                )
            )
        except Exception as e:
            if _is_index_not_found(e):
                logger.warning(
                    f"配置索引 '{self._settings.config_index}' 不存在，返回空结果"
                )
                return ServerResponse.success(ManagedIndicesPage())
            logger.error(f"{LOG_PREFIX} - getManagedIndices: {e}")
            return ServerResponse.failure(str(e))

    def retry_managed_index_policy(
        self, request: GatewayRequest
    ) -> ServerResponse[PolicyUpdateOutcome]:
        """重试索引上失败的策略执行.

        请求体: {"index": [...], "state": "可选，从该状态重新开始"}

        Returns:
            成功时 response 为 PolicyUpdateOutcome，失败索引逐条列出
        """
        try:
            payload = _require_payload(request)
            indices = _require_indices(payload, "index")
            state = payload.get("state")

            params: dict[str, Any] = {"index": ",".join(indices)}
            if state:
                params["body"] = {"state": state}

            cluster = self._clusters.get_cluster(ClusterRole.ISM)
            retry_response = cluster.call_with_request(request, "ism.retry", params)
            return ServerResponse.success(
                transform_policy_update_response(retry_response)
            )
        except Exception as e:
            logger.error(f"{LOG_PREFIX} - retryManagedIndexPolicy: {e}")
            return ServerResponse.failure(str(e))

    def change_policy(
        self, request: GatewayRequest
    ) -> ServerResponse[PolicyUpdateOutcome]:
        """更换索引应用的策略.

        请求体: {"indices": [...], "policyId": "...", "include": [{"state": "..."}],
        "state": "可选，切换后的起始状态"}

        Returns:
            成功时 response 为 PolicyUpdateOutcome
        """
        try:
            payload = _require_payload(request)
            indices = _require_indices(payload, "indices")
            policy_id = payload.get("policyId")
            if not policy_id or not isinstance(policy_id, str):
                raise RequestValidationError("policyId 不能为空")
            include = payload.get("include") or []
            if not isinstance(include, list):
                raise RequestValidationError("include 必须是列表")

            body: dict[str, Any] = {"policy_id": policy_id, "include": include}
            if payload.get("state"):
                body["state"] = payload["state"]
            params = {"index": ",".join(indices), "body": body}

            cluster = self._clusters.get_cluster(ClusterRole.ISM)
            change_response = cluster.call_with_request(request, "ism.change", params)
            return ServerResponse.success(
                transform_policy_update_response(change_response)
            )
        except Exception as e:
            logger.error(f"{LOG_PREFIX} - changePolicy: {e}")
            return ServerResponse.failure(str(e))

    def remove_policy(
        self, request: GatewayRequest
    ) -> ServerResponse[PolicyUpdateOutcome]:
        """移除索引上的策略，索引不再受 ISM 管理.

        请求体: {"indices": [...]}
        """
        try:
            payload = _require_payload(request)
            indices = _require_indices(payload, "indices")
            params = {"index": ",".join(indices)}

            cluster = self._clusters.get_cluster(ClusterRole.ISM)
            remove_response = cluster.call_with_request(request, "ism.remove", params)
            return ServerResponse.success(
                transform_policy_update_response(remove_response)
            )
        except Exception as e:
            logger.error(f"{LOG_PREFIX} - removePolicy: {e}")
            return ServerResponse.failure(str(e))
