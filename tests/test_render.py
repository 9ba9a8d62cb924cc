from __future__ import annotations

import io

from setstatus.kernel.types import DispatchReport
from setstatus.ui.render import (
    format_outcome_line,
    render_keywords_text,
    render_notice,
    render_report,
)


def test_notice_prefixes():
    assert render_notice("error", "boom") == "Error: boom"
    assert render_notice("warn", "careful") == "Warning: careful"
    assert render_notice("unknown", "x") == "Info: x"


def test_outcome_line_alignment():
    assert format_outcome_line("slack", "success", "Cleared") == "  Slack   ✓ Cleared"
    assert format_outcome_line("github", "skipped", "No change") == "  GitHub  - No change"
    assert format_outcome_line("asana", "advisory", "hint") == "  Asana   ! hint"


def test_failures_go_to_stderr():
    report = DispatchReport(keyword="meet")
    report.add("slack", "failure", "SLACK_PAT not set")
    report.add("github", "skipped", "No change")
    stdout, stderr = io.StringIO(), io.StringIO()

    render_report(report, stdout=stdout, stderr=stderr, is_tty=False)

    assert stdout.getvalue() == "  GitHub  - No change\n"
    assert stderr.getvalue() == "  Slack   ✗ SLACK_PAT not set\n"


def test_tty_output_keeps_text():
    report = DispatchReport(keyword="meet")
    report.add("slack", "success", "In a meeting :calendar:")
    stdout, stderr = io.StringIO(), io.StringIO()

    render_report(report, stdout=stdout, stderr=stderr, is_tty=True)

    assert "In a meeting :calendar:" in stdout.getvalue()
    assert stderr.getvalue() == ""


def test_keywords_text_flags():
    lines = render_keywords_text().splitlines()
    assert lines[0].startswith("lunch")
    assert "[dnd,busy,ooo]" in next(line for line in lines if line.startswith("vacation"))
    assert lines[-1].startswith("clear")
