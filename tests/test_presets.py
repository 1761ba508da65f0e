"""Tests for the built-in presets."""

from dayplanner.scheduling import DEFAULT_PRESETS, Preset, SchedulePattern, SchedulingConfiguration, get_preset


class TestDefaultPresets:

    def test_builtin_names(self):
        assert [p.name for p in DEFAULT_PRESETS] == ["Standard Workday", "Focus Day", "Weekend", "Light Day"]

    def test_ids_are_stable(self):
        assert get_preset("Focus Day").id == get_preset("focus day").id
        assert len({p.id for p in DEFAULT_PRESETS}) == len(DEFAULT_PRESETS)

    def test_focus_day(self):
        configuration = get_preset("Focus Day").configuration
        assert configuration.work_session_count == 7
        assert configuration.work_session_duration == 50
        assert configuration.pattern == SchedulePattern.ALL_WORK_FIRST

    def test_weekend_uses_its_own_calendars(self):
        weekend = get_preset("Weekend")
        assert weekend.default_start_hour == 10
        assert weekend.calendar_mapping.work_calendar_name == "Weekend Work"
        assert weekend.calendar_mapping.side_calendar_name == "Weekend Side"
        assert not weekend.configuration.schedule_planning

    def test_unknown_preset(self):
        assert get_preset("Holiday") is None


class TestPresetSnapshot:

    def test_from_configuration(self):
        configuration = SchedulingConfiguration(work_session_count=3)
        preset = Preset.from_configuration("Mine", configuration, icon="star")

        assert preset.name == "Mine"
        assert preset.configuration == configuration
        assert not preset.is_modified(configuration)
        assert preset.is_modified(SchedulingConfiguration(work_session_count=4))
