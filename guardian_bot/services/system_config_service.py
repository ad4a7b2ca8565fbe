from __future__ import annotations
import os
from typing import Any
from guardian_bot.domain.models import SystemConfig
from guardian_bot.repositories.csv_repo import CsvTable

SYSTEM_COLUMNS = ["key", "value"]

def parse_scoring_flag(v: Any) -> bool:
    # the settings API stores it either as a bool or as the string "true"
    return v is True or (isinstance(v, str) and v.strip().lower() == "true")

class SystemConfigService:
    """Runtime system settings (system.csv) layered over the env defaults."""

    def __init__(self, data_dir: str, default_name: str, default_scoring: bool = False):
        self.table = CsvTable(os.path.join(data_dir, "system.csv"), SYSTEM_COLUMNS)
        self.default_name = default_name
        self.default_scoring = default_scoring

    def _settings(self) -> dict[str, str]:
        df = self.table.read()
        if df.empty:
            return {}
        return {str(r["key"]): str(r["value"]) for r in df.to_dict("records")}

    def get(self) -> SystemConfig:
        s = self._settings()
        name = (s.get("name") or "").strip() or self.default_name
        scoring = parse_scoring_flag(s["scoring_system"]) if "scoring_system" in s else self.default_scoring
        return SystemConfig(display_name=name, scoring_enabled=scoring)

    def set(self, key: str, value: Any) -> None:
        self.table.upsert("key", {"key": key, "value": value})
