"""Tests for the timer card and main window.

Covers: time formatting, labels and button text per status, input
locking while a workout is active, phase colours, and settings being
written back when the configuration changes.
"""

import pytest

from hiittimer.app import HIITTimerApp
from hiittimer.settings import Settings, load_settings
from hiittimer.timer.controller import WorkoutController
from hiittimer.timer.engine import Configuration, Phase, Status
from hiittimer.ui.styles import NEUTRAL_COLOR, PHASE_COLORS, background_for
from hiittimer.ui.timer_widget import MAX_INPUT, TimerWidget, format_time, status_text

from helpers import run_to_completion


class TestFormatTime:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00"),
        (8, "00:08"),
        (60, "01:00"),
        (3090, "51:30"),
        (-5, "00:00"),
    ])
    def test_format(self, seconds, expected):
        assert format_time(seconds) == expected


class TestStyles:

    def test_neutral_unless_running(self, controller):
        assert background_for(controller.state) == NEUTRAL_COLOR
        controller.start()
        assert background_for(controller.state) == PHASE_COLORS[Phase.MOVE]
        controller.pause()
        assert background_for(controller.state) == NEUTRAL_COLOR


@pytest.mark.usefixtures("qapp")
class TestTimerWidget:

    def test_ready_display(self, controller):
        w = TimerWidget(controller)
        assert w._status_label.text() == "READY"
        assert w._time_label.text() == "3"
        assert w._rep_label.isHidden()
        assert w._start_pause_btn.text() == "Start"
        assert not w._reset_btn.isEnabled()
        assert w._move_spin.value() == 3
        assert w._rest_spin.value() == 2
        assert w._reps_spin.value() == 2
        assert w._total_label.text() == "Total Workout Time: 00:08"

    def test_running_display(self, controller, clock):
        w = TimerWidget(controller)
        w._start_pause_btn.click()
        clock.fire()
        assert status_text(controller.state) == "MOVE"
        assert w._status_label.text() == "MOVE"
        assert w._time_label.text() == "2"
        assert w._rep_label.text() == "Rep 1 / 2"
        assert not w._rep_label.isHidden()
        assert w._start_pause_btn.text() == "Pause"
        assert w._reset_btn.isEnabled()
        assert not w._move_spin.isEnabled()
        assert w._remaining_label.text() == "Remaining: 00:07"
        assert w._phase_bar.value() == 333  # 1 of 3 seconds

    def test_rest_and_pause_labels(self, controller, clock):
        w = TimerWidget(controller)
        controller.start()
        clock.fire(3)
        assert w._status_label.text() == "REST"
        w._start_pause_btn.click()
        assert controller.status == Status.PAUSED
        assert w._status_label.text() == "PAUSED"
        assert w._start_pause_btn.text() == "Resume"

    def test_done_display(self, controller, clock):
        w = TimerWidget(controller)
        controller.start()
        run_to_completion(controller, clock)
        assert w._status_label.text() == "DONE!"
        assert w._time_label.text() == "0"
        assert w._start_pause_btn.text() == "New Workout"
        assert w._move_spin.isEnabled()

    def test_reset_button(self, controller, clock):
        w = TimerWidget(controller)
        controller.start()
        clock.fire(2)
        w._reset_btn.click()
        assert controller.status == Status.READY
        assert w._time_label.text() == "3"

    def test_spin_edits_configuration(self, controller):
        w = TimerWidget(controller)
        w._move_spin.setValue(20)
        assert controller.configuration.move_time == 20
        assert w._time_label.text() == "20"
        w._reps_spin.setValue(4)
        assert controller.configuration.repetitions == 4
        assert w._total_label.text() == f"Total Workout Time: {format_time(20 * 4 + 2 * 3)}"

    def test_spin_cannot_go_below_one(self, controller):
        w = TimerWidget(controller)
        w._rest_spin.setValue(0)
        assert w._rest_spin.value() == 1
        assert controller.configuration.rest_time == 1

    def test_external_config_change_updates_inputs(self, controller):
        w = TimerWidget(controller)
        controller.set_configuration(rest_time=11)
        assert w._rest_spin.value() == 11

    def test_rejected_edit_snaps_back(self, controller):
        w = TimerWidget(controller)
        controller.start()
        # Force a value in even though the box is disabled.
        w._move_spin.setValue(50)
        assert controller.configuration.move_time == 3
        assert w._move_spin.value() == 3

    def test_inputs_show_values_above_default_range(self, qapp, sink, clock):
        ctrl = WorkoutController(sink, clock=clock, config=Configuration(5000, 2, 4000))
        w = TimerWidget(ctrl)
        assert w._move_spin.value() == 5000
        assert w._reps_spin.value() == 4000
        assert w._rest_spin.maximum() == MAX_INPUT
        assert ctrl.configuration == Configuration(5000, 2, 4000)

    def test_external_large_config_updates_inputs(self, controller):
        w = TimerWidget(controller)
        controller.set_configuration(rest_time=7200)
        assert w._rest_spin.value() == 7200
        assert controller.configuration.rest_time == 7200


@pytest.mark.usefixtures("qapp")
class TestMainWindow:

    def test_builds_from_settings(self, sink, clock):
        win = HIITTimerApp(
            Settings(move_time=30, rest_time=10, repetitions=5),
            sink=sink, clock=clock,
        )
        assert win.controller.configuration == Configuration(30, 10, 5)
        assert win.statusBar().currentMessage() == "Set your intervals and press Start"

    def test_status_bar_follows_phase(self, sink, clock):
        win = HIITTimerApp(
            Settings(move_time=3, rest_time=2, repetitions=2),
            sink=sink, clock=clock,
        )
        win.controller.start()
        assert win.statusBar().currentMessage() == "Move!"
        run_to_completion(win.controller, clock)
        assert win.statusBar().currentMessage() == "Workout complete!"

    def test_config_change_is_saved(self, sink, clock, isolated_settings):
        win = HIITTimerApp(Settings(), sink=sink, clock=clock)
        win.controller.set_configuration(move_time=42)
        assert isolated_settings.exists()
        assert load_settings().move_time == 42
        assert win.settings.move_time == 42

    def test_close_saves_and_stops(self, sink, clock, isolated_settings):
        win = HIITTimerApp(Settings(), sink=sink, clock=clock)
        win.show()
        win.controller.start()
        win.close()
        assert not clock.armed
        assert win.controller.status == Status.READY
        assert isolated_settings.exists()

    def test_default_sink_is_sound_manager(self, clock, tmp_path, monkeypatch):
        from hiittimer.audio.sounds import SoundManager
        monkeypatch.setattr("hiittimer.audio.sounds.SOUNDS_DIR", tmp_path)
        win = HIITTimerApp(Settings(sound_volume=40), clock=clock)
        assert isinstance(win._sink, SoundManager)
        assert win._sink.volume == 40
