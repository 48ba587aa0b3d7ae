from __future__ import annotations  # Backend route configuration

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

from .settings import Settings, settings as default_settings


class BackendRoute(BaseModel):  # Backend endpoint configuration
    name: str = "backend"
    base_url: str
    timeout_s: float = Field(default=120.0, ge=0.1)
    api_token: Optional[str] = None
    api_token_env: Optional[str] = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)


def route_from_settings(cfg: Optional[Settings] = None) -> BackendRoute:  # Build route from environment settings
    cfg = cfg or default_settings
    return BackendRoute(
        base_url=cfg.API_BASE_URL.rstrip("/"),
        timeout_s=cfg.REQUEST_TIMEOUT_S,
        api_token=cfg.API_TOKEN,
    )


def load_route(path: Path) -> BackendRoute:  # Load route configuration from disk
    data = path.read_text(encoding="utf-8")
    return BackendRoute.model_validate_json(data)
