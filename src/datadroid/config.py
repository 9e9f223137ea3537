"""Options shared by parse tasks and the sources they open."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import httpx


@dataclass
class ParserOptions:
    read_timeout: float = 60.0
    encoding: str = "utf-8"
    headers: Mapping[str, str] = field(default_factory=dict)
    follow_redirects: bool = True
    http_client: httpx.Client | None = None


__all__ = ["ParserOptions"]
