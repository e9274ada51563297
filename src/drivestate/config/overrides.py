from __future__ import annotations


# Overrides come from JSON payloads (dict-like objects), so typing stays loose here
# and shape problems are reported as ValueError with the offending key path.
from typing import Any, Mapping

from drivestate.config.settings import Settings
from drivestate.domain.models import EngineOptions

"""
Per-request settings overrides (safe subset).

API clients can send `settings_overrides` to tune engine defaults or the chat-context
knobs for a single call. This module:
- validates the override payload against a whitelist,
- deep-merges the safe subset onto current settings,
- re-validates with Pydantic to ensure types/ranges remain correct,
- fills engine options a caller left unset from the (possibly overridden) defaults.

`app` (log level, timezone) and `catalog` (a file path) are never overridable per request.
"""

# A value of True allows any keys under that subtree.
# A nested dict allows only the listed keys, recursively.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "engine": True,
    "context": {
        "max_upcoming_pois": True,
        "stopped_speed_mph": True,
    },
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    # Copy so the cached base settings payload is never mutated.
    merged: dict[str, Any] = dict(base)
    for key, override_value in override.items():
        if isinstance(override_value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), override_value)
            continue
        merged[key] = override_value
    return merged


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides contains a disallowed key: '{dotted_path}'"
            )

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides key '{dotted_path}' must be a mapping"
            )

        filtered[key] = _filter_overrides(
            value, allowed_tree=allowed, path=(*path, key)
        )
    return filtered


def apply_settings_overrides(
    settings: Settings, overrides: Mapping[str, Any] | None
) -> Settings:
    """Return `settings` with the whitelisted `overrides` merged in and re-validated."""
    if not overrides:
        return settings

    # Raises ValueError on disallowed keys.
    safe_overrides = _filter_overrides(
        overrides, allowed_tree=ALLOWED_SETTINGS_OVERRIDES_TREE
    )

    merged_payload = _deep_merge(settings.model_dump(mode="python"), safe_overrides)

    # Pydantic re-validation keeps ranges (e.g. cone_angle_degrees <= 360) enforced.
    return Settings.model_validate(merged_payload)


def resolve_engine_options(settings: Settings, options: EngineOptions | None = None) -> EngineOptions:
    """Fill fields the caller did not set from the configured engine defaults."""
    base = settings.engine.model_dump()
    if options is None:
        return EngineOptions(**base)
    explicit = {name: getattr(options, name) for name in options.model_fields_set}
    return EngineOptions(**{**base, **explicit})
