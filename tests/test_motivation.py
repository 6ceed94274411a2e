from toegrip.utils.motivation import (
    curl_percent,
    format_hold,
    format_remaining,
    get_combo_text,
    get_milestone_text,
    get_rep_text,
)


def test_format_remaining():
    assert format_remaining(180) == "3:00"
    assert format_remaining(65.9) == "1:05"
    assert format_remaining(0) == "0:00"
    assert format_remaining(-3) == "0:00"


def test_format_hold():
    assert format_hold(0) == "0.0s"
    assert format_hold(2.46) == "2.5s"


def test_combo_text_hidden_at_one():
    assert get_combo_text(1) is None
    assert get_combo_text(3) == "COMBO x3!"


def test_curl_percent_saturates():
    assert curl_percent(0.125) == 13
    assert curl_percent(1.7) == 100
    assert curl_percent(-0.2) == 0


def test_rep_and_milestone_texts():
    assert get_rep_text(4) == "Rep #4!"
    assert get_milestone_text(9) is None
    assert get_milestone_text(10) == "🎉 10 Reps!"
    assert get_milestone_text(0) is None
