from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    runtime_dir: Path
    log_level: str
    server_name: str
    result_decimals: int
    write_metrics: bool = True


def load_settings() -> Settings:
    load_dotenv(override=False)

    return Settings(
        runtime_dir=Path(os.getenv("RUNTIME_DIR", "./runtime")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        server_name=os.getenv("SERVER_NAME", "calculator-tools"),
        result_decimals=int(os.getenv("RESULT_DECIMALS", "2")),
        write_metrics=os.getenv("WRITE_METRICS", "true").lower() == "true",
    )
