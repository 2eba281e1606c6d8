import pytest

from src.shift_attendance.shift_attendance.common.payloads import unwrap_list


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([{"id": 1}], [{"id": 1}]),
        ({"data": [{"id": 2}]}, [{"id": 2}]),
        ({"successful_records": [{"id": 3}], "failed_records": []}, [{"id": 3}]),
        ({"data": None}, []),
        ({"message": "ok"}, []),
        (None, []),
        ("oops", []),
    ],
)
def test_unwrap_list_accepts_bare_list_or_envelope(payload, expected):
    assert unwrap_list(payload) == expected


def test_unwrap_list_custom_keys_in_order():
    payload = {"failed_records": [1], "data": [2]}

    assert unwrap_list(payload, "failed_records", "failed") == [1]
    assert unwrap_list(payload, "failed") == []
