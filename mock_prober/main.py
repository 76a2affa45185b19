"""
Mock Prober Server — 以模擬可用性取代真實 ICMP 探測。

每個 target 依 YAML 規則分類到 MTBF / MTTR 設定檔，
依 up/down 更新過程回報 probe_success，讓監控、告警、儀表板
可以在不送出任何封包的情況下端到端測試。

API:
    GET /probe?target={ip}&module={name}  → Prometheus text exposition
    GET /ping?target={ip}&module={name}   → CLI ping 輸出
    GET /status?module={name}             → 各 target 目前狀態
    GET /health

啟動:
    uvicorn mock_prober.main:app --host 0.0.0.0 --port 9115
"""
from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import FastAPI, HTTPException, Query, Response
from prometheus_client import CONTENT_TYPE_LATEST

from mock_prober.config import DEFAULT_MODULE, ModuleConfig, load_modules, settings
from mock_prober.generators import metrics_output, ping_output
from mock_prober.icmp import probe_fake_icmp
from mock_prober.prober import FakeProber
from mock_prober.rand import SafeRandom

logging.basicConfig(
    level=logging.DEBUG if settings.mock_prober_debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    modules: dict[str, ModuleConfig],
    rng: SafeRandom | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """
    建立 app；每個 module 各自擁有一個 FakeProber（狀態彼此獨立），
    共用同一個亂數來源。
    """
    rng = rng if rng is not None else SafeRandom(settings.mock_prober_seed)
    probers = {
        name: FakeProber(mc.profiles(), rng=rng, clock=clock)
        for name, mc in modules.items()
    }

    app = FastAPI(
        title="Mock Prober",
        description="以 MTBF / MTTR 模擬目標可達性的假探測服務",
        version="1.0.0",
    )
    app.state.modules = modules
    app.state.probers = probers

    def _prober(module: str) -> FakeProber:
        prober = probers.get(module)
        if prober is None:
            raise HTTPException(status_code=400, detail=f"Unknown module: {module}")
        return prober

    @app.get("/probe")
    def probe(
        target: str = Query(..., description="目標 IP / hostname"),
        module: str = Query(DEFAULT_MODULE, description="模組名稱"),
    ) -> Response:
        prober = _prober(module)
        result = probe_fake_icmp(target, prober, modules[module].ip_protocol)
        logger.debug(
            "probe %s (module=%s) success=%s", target, module, result.success,
        )
        return Response(content=metrics_output(result), media_type=CONTENT_TYPE_LATEST)

    @app.get("/ping")
    def ping(
        target: str = Query(..., description="目標 IP / hostname"),
        module: str = Query(DEFAULT_MODULE, description="模組名稱"),
    ) -> Response:
        reachable = _prober(module).probe(target)
        return Response(content=ping_output(target, reachable), media_type="text/plain")

    @app.get("/status")
    def status(module: str = Query(DEFAULT_MODULE)) -> dict:
        prober = _prober(module)
        targets = prober.snapshot()
        return {
            "module": module,
            "targets": targets,
            "down": [t["target"] for t in targets if not t["is_up"]],
            "summary": prober.describe_down(),
        }

    @app.get("/health")
    def health() -> dict:
        """健康檢查。"""
        return {
            "status": "ok",
            "service": "mock-prober",
            "seed": rng.seed,
            "modules": {name: len(mc.rules) for name, mc in modules.items()},
        }

    return app


app = create_app(load_modules(settings.mock_prober_config))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mock_prober.main:app",
        host="0.0.0.0",
        port=settings.mock_prober_port,
        reload=True,
    )
