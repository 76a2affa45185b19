"""
Mock Prober 設定。

服務參數由環境變數或 .env 讀取；故障規則由 YAML 檔定義::

    modules:
      fake_icmp:
        ip_protocol: ip4
        rules:
          - pattern: '192\\.20.*'
            mtbf: 10s
            mttr: 10s
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mock_prober.profiles import FailureProfile

logger = logging.getLogger(__name__)

DEFAULT_MODULE = "fake_icmp"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> float:
    """
    解析時間長度為秒數。

    接受數字（秒）或如 ``"1h30m"``、``"10s"``、``"250ms"`` 的字串，
    可帶負號。
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip()
    sign = 1.0
    if text[:1] in ("-", "+"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    try:
        return sign * float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for m in _DURATION_PART_RE.finditer(text):
        if m.start() != pos:
            break
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return sign * total


class FailureRule(BaseModel):
    """One classification rule: targets matching ``pattern`` get MTBF/MTTR."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    pattern: str = Field(alias="regexp")
    mtbf: float = 1.0
    mttr: float = 0.0

    @field_validator("mtbf", "mttr", mode="before")
    @classmethod
    def _duration(cls, v: Any) -> float:
        return parse_duration(v)

    def to_profile(self) -> FailureProfile:
        return FailureProfile(pattern=self.pattern, mtbf=self.mtbf, mttr=self.mttr)


class ModuleConfig(BaseModel):
    """A named probe module and its ordered failure rules."""

    ip_protocol: str = "ip4"
    rules: list[FailureRule] = []

    def profiles(self) -> tuple[FailureProfile, ...]:
        return tuple(rule.to_profile() for rule in self.rules)


def load_modules(path: str | Path) -> dict[str, ModuleConfig]:
    """
    讀取 YAML 模組設定。

    檔案不存在時記錄警告並回傳只有預設模組、沒有規則的設定
    （所有 target 永遠可達）。
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.warning("%s not found, all targets will be reachable", config_path)
        return {DEFAULT_MODULE: ModuleConfig()}

    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not raw:
        return {DEFAULT_MODULE: ModuleConfig()}

    modules = {
        name: ModuleConfig.model_validate(mc or {})
        for name, mc in (raw.get("modules") or {}).items()
    }
    if not modules:
        modules[DEFAULT_MODULE] = ModuleConfig()
    return modules


class MockProberSettings(BaseSettings):
    """Mock Prober 服務設定。讀取 .env 檔。"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 模組 / 故障規則 YAML
    mock_prober_config: str = "config/mock_prober.yaml"

    # 固定亂數種子（None = 由作業系統取得）
    mock_prober_seed: int | None = None

    # 服務器設定
    mock_prober_port: int = 9115
    mock_prober_debug: bool = False


settings = MockProberSettings()
