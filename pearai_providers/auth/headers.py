"""Default identity header provider."""
from __future__ import annotations

import platform
from typing import Dict, Mapping, Optional

from ..config.defaults import UNKNOWN_UNIQUE_ID, UNKNOWN_VALUE


class IdentityHeaderProvider:
    """Static identity headers: ``uniqueId``, ``extensionVersion`` and ``os``.

    Missing values fall back to ``"None"`` (unique id) and ``"Unknown"``.
    ``extra`` headers are merged last and may override the identity fields.
    """

    def __init__(
        self,
        unique_id: Optional[str] = None,
        extension_version: Optional[str] = None,
        os_name: Optional[str] = None,
        extra: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._headers: Dict[str, str] = {
            "uniqueId": unique_id or UNKNOWN_UNIQUE_ID,
            "extensionVersion": extension_version or UNKNOWN_VALUE,
            "os": os_name or UNKNOWN_VALUE,
        }
        if extra:
            self._headers.update(extra)

    @classmethod
    def from_config(cls, cfg: Mapping[str, object]) -> "IdentityHeaderProvider":
        """Build from a ``get_client_config`` mapping; ``os`` defaults to the platform."""
        return cls(
            unique_id=cfg.get("unique_id"),  # type: ignore[arg-type]
            extension_version=cfg.get("extension_version"),  # type: ignore[arg-type]
            os_name=cfg.get("os") or platform.system().lower() or None,  # type: ignore[arg-type]
        )

    async def get_headers(self) -> Mapping[str, str]:
        return dict(self._headers)


__all__ = ["IdentityHeaderProvider"]
