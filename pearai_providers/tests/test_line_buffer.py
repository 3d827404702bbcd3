from __future__ import annotations

from pearai_providers.base.streaming import LineBuffer

PAYLOAD = '{"content": "héllo ✓"}\r\n\n{"content": "wörld"}\n{"tail": 1}'.encode("utf-8")


def _collect(chunks):
    buf = LineBuffer()
    lines = []
    for chunk in chunks:
        lines.extend(buf.feed(chunk))
    return lines + buf.flush()


def test_same_lines_for_every_split_position():
    expected = _collect([PAYLOAD])
    assert expected == ['{"content": "héllo ✓"}', '{"content": "wörld"}', '{"tail": 1}']  # nosec B101
    for i in range(len(PAYLOAD) + 1):
        assert _collect([PAYLOAD[:i], PAYLOAD[i:]]) == expected  # nosec B101


def test_single_byte_chunks_keep_multibyte_characters_intact():
    lines = _collect([PAYLOAD[i : i + 1] for i in range(len(PAYLOAD))])
    assert lines[0] == '{"content": "héllo ✓"}'  # nosec B101
    assert all("�" not in line for line in lines)  # nosec B101


def test_partial_line_is_held_until_completed():
    buf = LineBuffer()
    assert buf.feed(b'{"a"') == []  # nosec B101
    assert buf.pending == '{"a"'  # nosec B101
    assert buf.feed(b": 1}\n") == ['{"a": 1}']  # nosec B101
    assert buf.pending == ""  # nosec B101
    assert buf.flush() == []  # nosec B101


def test_blank_lines_are_dropped():
    buf = LineBuffer()
    assert buf.feed(b"\n\r\n   \n") == []  # nosec B101


def test_feed_text_shares_pending_state_with_feed():
    buf = LineBuffer()
    assert buf.feed_text('{"a":') == []  # nosec B101
    assert buf.feed(b" 1}\n") == ['{"a": 1}']  # nosec B101
