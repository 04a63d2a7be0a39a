import pytest

from clippy.app.app_settings_manager import AppSettingsManager, DEFAULTS, RunMode


def test_defaults_without_overrides(tmp_settings):
    mgr = AppSettingsManager()
    assert mgr.run_mode is RunMode.PRODUCTION
    assert mgr.dev_mode is False
    assert mgr.logging_level == "INFO"
    assert mgr.handle_radius == DEFAULTS["clip"]["handle_radius"]
    assert mgr.overlay_opacity == pytest.approx(DEFAULTS["clip"]["overlay_opacity"])
    assert mgr.strict_transitions is False


def test_setters_persist_across_instances(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_run_mode("development")
    mgr.set_handle_radius(14)
    mgr.set_overlay_opacity(0.8)
    mgr.set_strict_transitions(True)

    reloaded = AppSettingsManager()
    assert reloaded.run_mode is RunMode.DEVELOPMENT
    assert reloaded.dev_mode is True
    assert reloaded.handle_radius == 14
    assert reloaded.overlay_opacity == pytest.approx(0.8)
    assert reloaded.strict_transitions is True


def test_invalid_overrides_fall_back(tmp_settings):
    tmp_settings.setValue("general/run_mode", "chaos")
    tmp_settings.setValue("general/logging_level", "LOUD")
    tmp_settings.setValue("clip/handle_radius", 500)
    tmp_settings.setValue("clip/overlay_opacity", "not-a-number")
    tmp_settings.sync()

    mgr = AppSettingsManager()
    assert mgr.run_mode is RunMode.PRODUCTION
    assert mgr.logging_level == "INFO"
    assert mgr.handle_radius == 10
    assert mgr.overlay_opacity == pytest.approx(0.45)


def test_reset_section(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_handle_radius(20)
    mgr.set_run_mode(RunMode.VERBOSE)

    mgr.reset_section("clip")
    assert mgr.handle_radius == 10
    assert mgr.run_mode is RunMode.VERBOSE

    with pytest.raises(ValueError):
        mgr.reset_section("view")


def test_reset_all_and_to_dict(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_logging_level("debug")
    assert mgr.to_dict()["general"]["logging_level"] == "DEBUG"

    mgr.reset_all_to_default()
    data = mgr.to_dict()
    assert data["general"] == {"run_mode": "production", "logging_level": "INFO"}
    assert data["clip"]["handle_radius"] == 10
