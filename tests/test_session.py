"""
Tests for the scan session cadence gate and display expiry.
"""

from conftest import rows_as_fragments
from proteinscore.pipeline import Reading
from proteinscore.session import ScanSession

LABEL = ["Nutrition Facts", "Calories 200", "Protein 10g"]


def test_cadence_gate_skips_early_passes():
    """
    Test the minimum interval between processed passes.

    Verifies:
    - A pass inside the interval is skipped
    - A pass exactly one interval later is processed
    """
    session = ScanSession(processing_interval=0.5)

    assert session.submit_lines(LABEL, now=0.0) is not None
    assert session.should_process(now=0.2) is False
    assert session.submit_lines(LABEL, now=0.2) is None
    assert session.submit_lines(LABEL, now=0.5) is not None
    assert session.pipeline.stats["passes"] == 2


def test_result_stays_displayed_until_fade_out():
    session = ScanSession(processing_interval=0.5, fade_out_delay=3.0)

    session.submit_lines(LABEL, now=0.0)
    session.submit_lines(["Nutrition Facts"], now=1.0)

    shown = session.current_result(now=2.9)
    assert shown is not None
    assert shown.reading == Reading(200, 10)


def test_fade_out_clears_result_and_history():
    """
    Test expiry after the fade-out delay.

    Verifies:
    - The displayed result is cleared 3 seconds after the last detection
    - The smoother history is reset with it
    """
    session = ScanSession(processing_interval=0.5, fade_out_delay=3.0)
    for t in (0.0, 0.5, 1.0):
        session.submit_lines(LABEL, now=t)
    assert len(session.pipeline.smoother) == 3

    assert session.current_result(now=4.0) is None
    assert len(session.pipeline.smoother) == 0


def test_new_detection_extends_display():
    session = ScanSession(processing_interval=0.5, fade_out_delay=3.0)

    session.submit_lines(LABEL, now=0.0)
    session.submit_lines(LABEL, now=2.5)

    assert session.current_result(now=5.0) is not None
    assert session.current_result(now=5.5) is None


def test_submit_fragments_uses_clock():
    ticks = iter([10.0, 10.1, 11.0])
    session = ScanSession(clock=lambda: next(ticks))

    fragments = rows_as_fragments(LABEL)
    assert session.submit(fragments) is not None
    assert session.submit(fragments) is None
    assert session.submit(fragments) is not None


def test_reset():
    session = ScanSession()
    session.submit_lines(LABEL, now=0.0)

    session.reset()

    assert session.current_result(now=0.1) is None
    assert session.should_process(now=0.1) is True
    assert len(session.pipeline.smoother) == 0
