"""Tests for Prometheus metrics."""

import pytest
from prometheus_client import REGISTRY

from cascade.config.models.manager import ManagerOptions
from cascade.engine.manager import ConfigurationManager
from cascade.providers.memory import InMemoryConfigurationProvider


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestManagerMetrics:
    """Tests for metrics recorded by the manager."""

    @pytest.mark.asyncio
    async def test_pass_and_failure_counters(self, passthrough_adapter) -> None:
        """Passes, provider failures and the snapshot version are recorded."""
        loads_before = _sample("cascade_load_total", {"operation": "load", "outcome": "success"})
        failures_before = _sample("cascade_provider_failures_total", {"source": "metrics-broken"})

        broken = InMemoryConfigurationProvider("metrics-broken")
        broken.fail_with(RuntimeError("boom"))
        manager = ConfigurationManager(
            [broken, InMemoryConfigurationProvider("metrics-ok", {"a": 1})],
            adapter=passthrough_adapter,
        )
        await manager.initialize(ManagerOptions())

        assert (
            _sample("cascade_load_total", {"operation": "load", "outcome": "success"})
            == loads_before + 1
        )
        assert (
            _sample("cascade_provider_failures_total", {"source": "metrics-broken"})
            == failures_before + 1
        )
        assert _sample("cascade_snapshot_version") == 1
