"""Tests for the session controller, record and simulated runner."""

from __future__ import annotations

import pytest

from motor_assessment.analysis.scoring import OverallStatus
from motor_assessment.analysis.tapping import TappingGrade
from motor_assessment.core.config import Settings
from motor_assessment.core.exceptions import (
    ConfigurationError,
    DuplicateResultError,
    PhaseStateError,
)
from motor_assessment.core.types import Hand, PhaseKind
from motor_assessment.sensing.samples import MotionSample
from motor_assessment.session import (
    STANDARD_PROTOCOL,
    PhaseState,
    SessionRecord,
    SimulatedHand,
    TestSessionController,
    VirtualClock,
    run_simulated_session,
)


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def controller(clock) -> TestSessionController:
    return TestSessionController(clock=clock)


def _sample(timestamp: int, x: float = 0.0) -> MotionSample:
    return MotionSample(x, 0.0, 0.0, timestamp)


class TestSessionRecord:
    """Tests for SessionRecord."""

    def test_write_once(self, tapping_factory):
        """Test a second store for the same pair is rejected."""
        record = SessionRecord()
        record.store(Hand.LEFT, PhaseKind.TAPPING, tapping_factory(Hand.LEFT))

        with pytest.raises(DuplicateResultError):
            record.store(Hand.LEFT, PhaseKind.TAPPING, tapping_factory(Hand.LEFT))

    def test_type_checked(self, tapping_factory):
        """Test a tapping result cannot fill a tremor slot."""
        with pytest.raises(TypeError):
            SessionRecord().store(Hand.LEFT, PhaseKind.TREMOR, tapping_factory(Hand.LEFT))

    def test_complete_and_reset(self, complete_record):
        """Test completeness and reset."""
        assert complete_record.is_complete

        complete_record.reset()

        assert not complete_record.is_complete
        assert complete_record.to_dict() == {
            "left_tapping": None,
            "right_tapping": None,
            "left_tremor": None,
            "right_tremor": None,
        }


class TestPhaseControl:
    """Tests for phase start and stop."""

    def test_initial_state(self, controller):
        """Test a new controller is idle."""
        assert controller.state is PhaseState.IDLE
        assert controller.active_phase is None
        assert controller.next_pending_phase() == (PhaseKind.TAPPING, Hand.LEFT)

    def test_full_tapping_phase(self, controller, even_taps):
        """Test a tapping phase that runs to expiry."""
        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=0.0)
        assert controller.state is PhaseState.TAPPING_ACTIVE

        for t in even_taps:
            assert controller.on_tap(now=t)

        progress = controller.tick(now=20.0)

        assert progress.finished is True
        assert progress.percent == 100.0
        assert progress.result.score == pytest.approx(73.0, abs=0.01)
        assert progress.result.grade is TappingGrade.NORMAL
        assert controller.state is PhaseState.RESULTS
        assert controller.last_finished == (Hand.LEFT, PhaseKind.TAPPING)
        assert controller.record.left_tapping is progress.result

    def test_tick_progress(self, controller):
        """Test countdown before expiry."""
        controller.start_phase(PhaseKind.TREMOR, Hand.RIGHT, now=100.0)

        progress = controller.tick(now=105.0)

        assert progress.finished is False
        assert progress.elapsed == pytest.approx(5.0)
        assert progress.remaining == pytest.approx(5.0)
        assert progress.percent == pytest.approx(50.0)
        assert controller.is_active

    def test_tick_when_idle(self, controller):
        """Test ticks without an active phase."""
        assert controller.tick(now=1.0) is None

    def test_injected_clock(self, controller, clock):
        """Test the controller reads the injected clock."""
        clock.now = 10.0
        controller.start_phase(PhaseKind.TAPPING, Hand.RIGHT, duration_seconds=5.0)
        clock.now = 11.0
        controller.on_tap()
        clock.now = 15.0

        assert controller.tick().finished is True
        assert controller.record.right_tapping.tap_count == 1

    def test_early_stop_uses_elapsed_time(self, controller):
        """Test an explicit stop rates taps over the elapsed window."""
        controller.start_phase(PhaseKind.TAPPING, Hand.RIGHT, now=0.0)
        for i in range(1, 9):
            controller.on_tap(now=i * 0.25)

        result = controller.stop_phase(now=2.0)

        assert result.duration == pytest.approx(2.0)
        assert result.average_frequency == pytest.approx(4.0)

    def test_stop_when_idle(self, controller):
        """Test stop without an active phase is a no-op."""
        assert controller.stop_phase(now=0.0) is None
        assert controller.state is PhaseState.IDLE

    def test_start_while_active(self, controller):
        """Test a second start is rejected."""
        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=0.0)

        with pytest.raises(PhaseStateError):
            controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=1.0)

    def test_duplicate_phase(self, controller):
        """Test a completed pair cannot run again."""
        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=0.0)
        controller.stop_phase(now=1.0)

        with pytest.raises(DuplicateResultError):
            controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=2.0)

    def test_invalid_duration(self, controller):
        """Test non-positive phase durations raise."""
        with pytest.raises(ConfigurationError):
            controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, duration_seconds=0.0, now=0.0)

    def test_result_published_once(self):
        """Test the callback receives each finished phase."""
        published = []
        controller = TestSessionController(
            on_result=lambda hand, kind, result: published.append((hand, kind, result))
        )

        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)
        controller.tick(now=10.0)
        controller.tick(now=11.0)
        controller.stop_phase(now=12.0)

        assert len(published) == 1
        assert published[0][:2] == (Hand.LEFT, PhaseKind.TREMOR)
        assert published[0][2].data_quality == "Insufficient"


class TestInboundEvents:
    """Tests for sample and tap ingestion."""

    def test_sample_outside_tremor_phase(self, controller):
        """Test samples are dropped unless a tremor phase is active."""
        assert controller.on_motion_sample(_sample(0)) is False

        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=0.0)

        assert controller.on_motion_sample(_sample(10)) is False
        assert len(controller.samples) == 0

    def test_tap_outside_tapping_phase(self, controller):
        """Test taps are dropped unless a tapping phase is active."""
        assert controller.on_tap(now=0.0) is False

        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)

        assert controller.on_tap(now=1.0) is False
        assert controller.tap_count == 0

    def test_out_of_order_sample(self, controller):
        """Test samples older than the last accepted one are dropped."""
        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)

        assert controller.on_motion_sample(_sample(100))
        assert controller.on_motion_sample(_sample(100))
        assert controller.on_motion_sample(_sample(80)) is False
        assert len(controller.samples) == 2

    def test_late_tap(self, controller):
        """Test taps after the window are dropped."""
        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, duration_seconds=5.0, now=0.0)

        assert controller.on_tap(now=5.0)
        assert controller.on_tap(now=5.5) is False
        assert controller.tap_count == 1

    def test_ingestion_halts_after_stop(self, controller):
        """Test nothing is accepted once the phase closes."""
        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)
        for i in range(30):
            controller.on_motion_sample(_sample(i * 20, x=0.1))
        result = controller.stop_phase(now=1.0)

        assert controller.on_motion_sample(_sample(1000, x=0.1)) is False
        assert result.sample_count == 30

    def test_buffers_reset_between_phases(self, controller):
        """Test a new phase starts from empty buffers."""
        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)
        for i in range(30):
            controller.on_motion_sample(_sample(i * 20))
        controller.stop_phase(now=1.0)
        assert len(controller.live_window()) == 30

        controller.start_phase(PhaseKind.TREMOR, Hand.RIGHT, now=2.0)

        assert len(controller.samples) == 0
        assert controller.live_window() == []
        assert controller.on_motion_sample(_sample(0))

    def test_live_window_bounded(self):
        """Test the live trace keeps the configured number of samples."""
        settings = Settings._from_dict({"display": {"live_window": 10}})
        controller = TestSessionController(settings)
        controller.start_phase(PhaseKind.TREMOR, Hand.LEFT, now=0.0)
        for i in range(40):
            controller.on_motion_sample(_sample(i * 20))

        assert len(controller.live_window()) == 10
        assert len(controller.live_window(3)) == 3
        assert len(controller.samples) == 40


class TestProtocol:
    """Tests for protocol order, summary and restart."""

    def test_protocol_order(self, controller):
        """Test the standard phase order."""
        seen = []
        now = 0.0
        while controller.next_pending_phase() is not None:
            phase = controller.start_next_phase(now=now)
            seen.append((phase.kind, phase.hand))
            now += 1.0
            controller.stop_phase(now=now)

        assert tuple(seen) == STANDARD_PROTOCOL
        with pytest.raises(PhaseStateError):
            controller.start_next_phase(now=now)

    def test_summary_and_restart(self, controller):
        """Test summary before and after restart."""
        controller.start_phase(PhaseKind.TAPPING, Hand.LEFT, now=0.0)
        controller.stop_phase(now=1.0)

        assert controller.get_session_summary().overall_status is OverallStatus.INCOMPLETE

        controller.restart()

        assert controller.state is PhaseState.IDLE
        assert controller.record.left_tapping is None
        assert controller.last_finished is None
        assert controller.next_pending_phase() == (PhaseKind.TAPPING, Hand.LEFT)


class TestSimulatedSession:
    """Tests for run_simulated_session."""

    def test_complete_session(self):
        """Test all four phases are recorded."""
        events = []

        summary = run_simulated_session(seed=1, event_cb=events.append)

        assert summary.record.is_complete
        assert summary.overall_status is not OverallStatus.INCOMPLETE
        assert [e["event"] for e in events].count("phase_complete") == 4
        assert events[0]["event"] == "session_start"
        assert events[-1]["event"] == "session_complete"

    def test_tremor_hand_detected(self):
        """Test a strong simulated tremor is detected on that hand only."""
        profiles = {
            Hand.LEFT: SimulatedHand(tremor_amplitude=0.1),
            Hand.RIGHT: SimulatedHand(tremor_amplitude=0.005),
        }

        summary = run_simulated_session(profiles=profiles, seed=5)

        assert summary.record.left_tremor.has_tremor is True
        assert summary.record.right_tremor.has_tremor is False
        assert summary.bilateral.amplitude_asymmetry is True
        assert summary.overall_status is OverallStatus.NEEDS_ATTENTION

    def test_reproducible(self):
        """Test identical seeds give identical summaries."""
        a = run_simulated_session(seed=11).to_dict()
        b = run_simulated_session(seed=11).to_dict()

        assert a == b

    def test_tapping_rate(self):
        """Test simulated tapping rate is recovered."""
        profiles = {
            Hand.LEFT: SimulatedHand(tap_rate=4.0, slowdown=0.0, jitter=0.0),
            Hand.RIGHT: SimulatedHand(tap_rate=4.0, slowdown=0.0, jitter=0.0),
        }

        summary = run_simulated_session(profiles=profiles)

        assert summary.record.left_tapping.tap_count == 79
        assert summary.record.left_tapping.average_frequency == pytest.approx(3.95)
