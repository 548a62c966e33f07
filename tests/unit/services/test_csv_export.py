from datetime import UTC, datetime

from sms_audit.app.services.csv_export import EXPORT_COLUMNS, format_csv_value, render_csv


def cell_line(value) -> str:
    """Render a two-column row and return its data line"""
    return render_csv([{"value": value, "n": 1}], columns=["value", "n"]).split("\n", 1)[1]


def test_plain_values_are_not_quoted():
    assert cell_line("LOGIN_FAILED") == "LOGIN_FAILED,1"
    assert cell_line(15) == "15,1"


def test_value_with_comma_is_quoted():
    assert cell_line("New York, NY") == '"New York, NY",1'


def test_embedded_quotes_are_doubled():
    assert cell_line('said "hi"') == '"said ""hi""",1'


def test_value_with_newline_is_quoted():
    assert cell_line("line one\nline two") == '"line one\nline two",1'


def test_none_renders_empty():
    assert format_csv_value(None) == ""
    assert cell_line(None) == ",1"


def test_booleans_and_datetimes():
    assert format_csv_value(True) == "true"
    assert format_csv_value(False) == "false"
    assert format_csv_value(datetime(2026, 10, 19, 2, 0, tzinfo=UTC)) == "2026-10-19T02:00:00+00:00"


def test_render_csv_header_and_rows():
    rows = [
        {
            "occurred_at": None,
            "event_type": "LOGIN_FAILED",
            "subject_user_id": None,
            "attempted_user_id": "alice",
            "succeeded": False,
            "source_ip": "203.0.113.5",
            "user_agent": "Mozilla/5.0 (X11, Linux)",
            "error_message": "Invalid password",
            "risk_score": 15,
            "description": "Failed login attempt for user alice: Invalid password",
        }
    ]

    lines = render_csv(rows).split("\n")

    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert lines[1] == (
        ',LOGIN_FAILED,,alice,false,203.0.113.5,"Mozilla/5.0 (X11, Linux)",'
        "Invalid password,15,Failed login attempt for user alice: Invalid password"
    )


def test_render_csv_without_rows_is_header_only():
    assert render_csv([]) == ",".join(EXPORT_COLUMNS)
