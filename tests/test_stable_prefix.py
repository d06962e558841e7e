from __future__ import annotations

from stable_prefix import byte_length, common_prefix_byte_length, slice_utf8


def test_common_prefix_of_extension() -> None:
    assert common_prefix_byte_length("Hello", "Hello world") == 5


def test_common_prefix_stops_at_first_mismatch() -> None:
    assert common_prefix_byte_length("I think maybe", "I think we should") == 8


def test_disagreement_from_first_code_point_is_zero() -> None:
    assert common_prefix_byte_length("Ala", "Ola") == 0
    assert common_prefix_byte_length("", "anything") == 0


def test_multibyte_prefix_is_measured_in_bytes() -> None:
    # "ż" and "ó" are two bytes each in UTF-8
    assert common_prefix_byte_length("zażółć", "zażółw") == byte_length("zażół")
    assert common_prefix_byte_length("zażółć", "zażółw") == 9


def test_differing_multibyte_code_points_sharing_a_lead_byte_do_not_split() -> None:
    # "ą" (c4 85) and "ć" (c4 87) share their first byte
    a, b = "xą", "xć"
    assert common_prefix_byte_length(a, b) == 1


def test_prefix_is_a_valid_split_point_of_both() -> None:
    pairs = [
        ("Grüße aus Köln", "Grüße an alle"),
        ("日本語のテキスト", "日本語です"),
        ("emoji 🎙️ test", "emoji 🎙 test"),
        ("same", "same"),
    ]
    for a, b in pairs:
        n = common_prefix_byte_length(a, b)
        assert n <= min(byte_length(a), byte_length(b))
        a.encode("utf-8")[:n].decode("utf-8")
        b.encode("utf-8")[:n].decode("utf-8")
        assert a.encode("utf-8")[:n] == b.encode("utf-8")[:n]


def test_slice_utf8_by_byte_offsets() -> None:
    assert slice_utf8("Hello world.", 5) == " world."
    assert slice_utf8("I think we should", 0, 8) == "I think "
    assert slice_utf8("zażółć", 2, 6) == "żó"


def test_slice_utf8_never_returns_partial_code_points() -> None:
    text = "ażb"  # "ż" occupies bytes 1..2
    assert slice_utf8(text, 2) == "b"
    assert slice_utf8(text, 0, 2) == "a"
    assert slice_utf8(text, 2, 2) == ""


def test_slice_utf8_clamps_out_of_range_offsets() -> None:
    assert slice_utf8("abc", 10) == ""
    assert slice_utf8("abc", -3, 100) == "abc"
