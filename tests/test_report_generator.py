"""
Tests for Markdown report generation
"""

from xorscope.core.ecb import EcbCandidate
from xorscope.core.engine import BreakResult, XorscopeEngine
from xorscope.core.xor_ops import repeating_key_xor
from xorscope.utils.report_generator import ReportGenerator


def test_break_report(dickens):
    result = XorscopeEngine(verbose=False).break_bytes(
        repeating_key_xor(dickens, b"YELLOW"), input_name="6.txt"
    )
    report = ReportGenerator().generate_markdown(result, "Challenge 6")

    assert report.startswith("# Xorscope Report: Challenge 6")
    assert "`6.txt`" in report
    assert "| 1 | 6 |" in report
    assert "**Best key**: `'YELLOW'` (6 bytes)" in report
    assert "It was the best of times" in report


def test_break_report_without_recovery():
    result = BreakResult(input_name="empty", warnings=["Ciphertext too short (0 bytes, need 8)"])
    report = ReportGenerator().generate_markdown(result)
    assert "No key was recovered." in report
    assert "No keysize could be sampled." in report
    assert "Ciphertext too short" in report


def test_ecb_report():
    candidates = [EcbCandidate(line_number=133, ciphertext=b"\xd8" * 64, repeated_blocks=3)]
    report = ReportGenerator().generate_ecb_markdown(candidates, "Challenge 8")
    assert "| 133 | 3 |" in report
    assert "..." in report


def test_ecb_report_empty():
    assert "No ciphertext line" in ReportGenerator().generate_ecb_markdown([])


def test_format_bytes():
    generator = ReportGenerator()
    assert generator._format_bytes(512) == "512.0 B"
    assert generator._format_bytes(2048) == "2.0 KB"
