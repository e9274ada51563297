from __future__ import annotations

import pytest

from drivestate.config.settings import get_settings

# The override helper is pure (no I/O) and guards what API clients may change.
from drivestate.config.overrides import apply_settings_overrides, resolve_engine_options
from drivestate.domain.models import EngineOptions


def test_default_settings_match_engine_defaults():
    settings = get_settings()
    assert settings.engine.max_distance_miles == 25
    assert settings.engine.cone_angle_degrees == 90
    assert settings.engine.max_results == 20


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()
    out = apply_settings_overrides(settings, None)
    # Fast path: no rebuild.
    assert out is settings


def test_apply_settings_overrides_can_override_allowed_knobs():
    settings = get_settings()
    overrides = {"engine": {"cone_angle_degrees": 360}, "context": {"max_upcoming_pois": 3}}

    out = apply_settings_overrides(settings, overrides)

    assert out.engine.cone_angle_degrees == 360
    assert out.context.max_upcoming_pois == 3
    # The cached settings object must not leak the override into other requests.
    assert settings.engine.cone_angle_degrees == 90


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"disallowed key: 'catalog'"):
        apply_settings_overrides(settings, {"catalog": {"path": "/etc/passwd"}})
    with pytest.raises(ValueError, match=r"context\.max_eta_minutes"):
        apply_settings_overrides(settings, {"context": {"max_eta_minutes": 5}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"settings_overrides key 'context' must be a mapping"):
        apply_settings_overrides(settings, {"context": 1})


def test_apply_settings_overrides_revalidates_ranges():
    settings = get_settings()
    # Pydantic's ValidationError is a ValueError.
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"engine": {"cone_angle_degrees": 400}})


def test_resolve_engine_options_only_overrides_explicit_fields():
    settings = get_settings()
    resolved = resolve_engine_options(settings, EngineOptions(max_results=5))
    assert resolved.max_results == 5
    assert resolved.max_distance_miles == settings.engine.max_distance_miles
    assert resolved.cone_angle_degrees == settings.engine.cone_angle_degrees

    assert resolve_engine_options(settings, None).max_results == settings.engine.max_results


def test_resolve_engine_options_reads_overridden_engine_defaults():
    settings = apply_settings_overrides(get_settings(), {"engine": {"max_results": 3}})
    assert resolve_engine_options(settings, EngineOptions(cone_angle_degrees=360)).max_results == 3
