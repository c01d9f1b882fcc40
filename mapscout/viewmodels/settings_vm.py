from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from ..adapters.geocoding_nominatim import NOMINATIM_URL
from ..adapters.http_client import DEFAULT_USER_AGENT, HttpConfig
from ..adapters.location_ip import IP_LOCATION_URL
from ..adapters.routing_osrm import OSRM_URL
from ..adapters.scene_mapillary import MAPILLARY_URL
from ..domain.geo import DEFAULT_SPAN_M, HOME, Coordinate
from ..utils.logging import env_requests_debug

LOCATION_SOURCES: tuple[str, ...] = ("static", "ip")
ENV_PREFIX = "MAPSCOUT_"


@dataclass
class SettingsConfig:
    """Typed runtime settings for service endpoints and map defaults."""

    geocoding_url: str = NOMINATIM_URL
    routing_url: str = OSRM_URL
    scene_url: str = MAPILLARY_URL
    location_url: str = IP_LOCATION_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_s: int = 10
    retries: int = 2
    camera_span_m: int = int(DEFAULT_SPAN_M)
    scene_radius_m: int = 50
    location_source: str = "static"
    static_latitude: float = HOME.latitude
    static_longitude: float = HOME.longitude


_URL_KEYS = {"geocoding_url", "routing_url", "scene_url", "location_url"}
_INT_KEYS = {"request_timeout_s", "retries", "camera_span_m", "scene_radius_m"}
_FLOAT_KEYS = {"static_latitude", "static_longitude"}


def _default_debug_logging() -> bool:
    return env_requests_debug()


class SettingsVM:
    """Keeps runtime settings and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.mapillary_token: str = ""
        self.debug_logging: bool = _default_debug_logging()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SettingsVM":
        """Build settings from ``MAPSCOUT_*`` environment variables (``MAPSCOUT_ROUTING_URL`` ...)."""
        env = os.environ if environ is None else environ
        payload: Dict[str, Any] = {}
        for key in SettingsVM.allowed_keys():
            value = env.get(f"{ENV_PREFIX}{key.upper()}")
            if value is not None and value.strip():
                payload[key] = value
        vm = cls()
        vm.apply_dict(payload)
        return vm

    @staticmethod
    def allowed_keys() -> set[str]:
        return {f.name for f in fields(SettingsConfig)} | {"mapillary_token", "debug_logging"}

    # ------------------------------------------------------------------
    # Derived values consumed by the runtime
    # ------------------------------------------------------------------
    @property
    def camera_span_m(self) -> float:
        return float(self.config.camera_span_m)

    @property
    def static_location(self) -> Coordinate:
        return Coordinate(latitude=self.config.static_latitude, longitude=self.config.static_longitude)

    def http_config(self) -> HttpConfig:
        return HttpConfig(
            request_timeout_s=self.config.request_timeout_s,
            retries=self.config.retries,
            user_agent=self.config.user_agent,
        )

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        if self.config.location_source not in LOCATION_SOURCES:
            return False
        if self.config.request_timeout_s <= 0 or self.config.retries < 0:
            return False
        if self.config.camera_span_m <= 0 or self.config.scene_radius_m <= 0:
            return False
        return all(getattr(self.config, key) for key in _URL_KEYS)

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply a flat settings mapping to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        unknown = set(payload.keys()) - self.allowed_keys()
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_field in fields(SettingsConfig):
            if cfg_field.name in payload:
                updates[cfg_field.name] = self._coerce_config_value(cfg_field.name, payload[cfg_field.name])

        if updates:
            candidate = replace(self.config, **updates)
            # Validate the static coordinate as a pair.
            Coordinate(latitude=candidate.static_latitude, longitude=candidate.static_longitude)
            self.config = candidate

        if "mapillary_token" in payload:
            self.mapillary_token = self._coerce_optional_str(payload["mapillary_token"])

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot.update(
            {
                "mapillary_token": self.mapillary_token,
                "debug_logging": bool(self.debug_logging),
            }
        )
        return snapshot

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key in _URL_KEYS:
            return self._coerce_url(key, raw)
        if key in _INT_KEYS:
            return self._coerce_int(key, raw, allow_negative=False)
        if key in _FLOAT_KEYS:
            return self._coerce_float(key, raw)
        if key == "location_source":
            source = self._coerce_optional_str(raw).lower()
            if source not in LOCATION_SOURCES:
                raise ValueError(f"location_source must be one of: {', '.join(LOCATION_SOURCES)}.")
            return source
        if key == "user_agent":
            agent = self._coerce_optional_str(raw)
            return agent or DEFAULT_USER_AGENT
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(name: str, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string URL.")
        cleaned = value.strip()
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError(f"{name} must start with http:// or https://.")
        return cleaned

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced

    @staticmethod
    def _coerce_float(name: str, value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be a number.")
        try:
            return float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be a number.") from exc
