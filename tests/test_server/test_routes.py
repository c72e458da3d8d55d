"""托管索引 HTTP 路由测试."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ismflow.connection.models import ClusterConfig
from ismflow.connection.tool import ClusterClientFactory
from ismflow.managed_indices.models import (
    ManagedIndicesPage,
    PolicyUpdateOutcome,
    ServerResponse,
)
from ismflow.server import create_app, create_router


@pytest.fixture
def service() -> MagicMock:
    """模拟托管索引网关."""
    return MagicMock()


@pytest.fixture
def client(service: MagicMock) -> TestClient:
    """挂载路由的测试客户端."""
    app = FastAPI()
    app.include_router(create_router(service))
    return TestClient(app)


class TestManagedIndicesRoutes:
    """查询接口测试."""

    def test_list_managed_indices(self, client, service) -> None:
        """测试查询参数传递与响应格式."""
        service.get_managed_indices.return_value = ServerResponse.success(
            ManagedIndicesPage()
        )

        response = client.get(
            "/api/ism/managedIndices",
            params={
                "from": 20,
                "size": 10,
                "search": "logs",
                "sortField": "index",
                "sortDirection": "asc",
            },
            headers={"Authorization": "Basic abc"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "response": {"managedIndices": [], "totalManagedIndices": 0},
        }
        request = service.get_managed_indices.call_args.args[0]
        assert request.query == {
            "from": 20,
            "size": 10,
            "search": "logs",
            "sortField": "index",
            "sortDirection": "asc",
        }
        assert request.headers["authorization"] == "Basic abc"

    def test_list_defaults(self, client, service) -> None:
        """测试未提供查询参数时的默认值."""
        service.get_managed_indices.return_value = ServerResponse.success(
            ManagedIndicesPage()
        )

        client.get("/api/ism/managedIndices")

        request = service.get_managed_indices.call_args.args[0]
        assert request.query["from"] == 0
        assert request.query["size"] is None
        assert request.query["sortField"] is None

    def test_get_managed_index(self, client, service) -> None:
        """测试按 ID 获取."""
        service.get_managed_index.return_value = ServerResponse.success(
            {"_id": "abc", "found": True}
        )

        response = client.get("/api/ism/managedIndices/abc")

        assert response.json() == {"ok": True, "response": {"_id": "abc", "found": True}}
        assert service.get_managed_index.call_args.args[0].params == {"id": "abc"}

    def test_failure_envelope(self, client, service) -> None:
        """测试失败响应仍为 HTTP 200."""
        service.get_managed_index.return_value = ServerResponse.failure("boom")

        response = client.get("/api/ism/managedIndices/abc")

        assert response.status_code == 200
        assert response.json() == {"ok": False, "error": "boom"}


class TestPolicyRoutes:
    """retry/changePolicy/removePolicy 接口测试."""

    def test_retry(self, client, service) -> None:
        """测试重试接口."""
        service.retry_managed_index_policy.return_value = ServerResponse.success(
            PolicyUpdateOutcome(updated_indices=1)
        )

        response = client.post(
            "/api/ism/retry", json={"index": ["logs-1"], "state": "hot"}
        )

        assert response.json() == {
            "ok": True,
            "response": {"failures": False, "updatedIndices": 1, "failedIndices": []},
        }
        request = service.retry_managed_index_policy.call_args.args[0]
        assert request.payload == {"index": ["logs-1"], "state": "hot"}

    def test_change_policy(self, client, service) -> None:
        """测试更换策略接口保留 camelCase 请求体."""
        service.change_policy.return_value = ServerResponse.success(
            PolicyUpdateOutcome()
        )

        client.post(
            "/api/ism/changePolicy",
            json={
                "indices": ["logs-1"],
                "policyId": "p",
                "include": [{"state": "hot"}],
                "state": None,
            },
        )

        request = service.change_policy.call_args.args[0]
        assert request.payload == {
            "indices": ["logs-1"],
            "policyId": "p",
            "include": [{"state": "hot"}],
            "state": None,
        }

    def test_remove_policy(self, client, service) -> None:
        """测试移除策略接口."""
        service.remove_policy.return_value = ServerResponse.success(
            PolicyUpdateOutcome(updated_indices=2)
        )

        response = client.post("/api/ism/removePolicy", json={"indices": ["a", "b"]})

        assert response.json()["response"]["updatedIndices"] == 2
        assert service.remove_policy.call_args.args[0].payload == {"indices": ["a", "b"]}

    def test_invalid_body_rejected(self, client, service) -> None:
        """测试请求体缺少必需字段时返回 422."""
        response = client.post("/api/ism/removePolicy", json={})

        assert response.status_code == 422
        service.remove_policy.assert_not_called()


class TestCreateApp:
    """create_app 测试."""

    @patch("ismflow.connection.tool.OpenSearch")
    def test_app_closes_clients_on_shutdown(self, mock_os) -> None:
        """测试应用关闭时释放集群客户端."""
        mock_os.return_value.search.return_value = {"hits": {"hits": []}}
        factory = ClusterClientFactory([ClusterConfig(hosts=["http://data:9200"])])
        app = create_app(factory)

        with TestClient(app) as client:
            response = client.get("/api/ism/managedIndices")
            assert response.json() == {
                "ok": True,
                "response": {"managedIndices": [], "totalManagedIndices": 0},
            }

        mock_os.return_value.close.assert_called_once()
