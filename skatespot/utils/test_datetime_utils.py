# skatespot/utils/test_datetime_utils.py
"""
시간 유틸리티 기능 테스트

사용법: python -m pytest skatespot/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from skatespot.utils.datetime_utils import DateTimeUtils

def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

def test_to_iso_string_uses_z_suffix():
    dt = datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9)))
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00Z"

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'addedAt': date(2020, 1, 15),
        'timestamp': datetime(2024, 1, 15, 10, 30),
        'friends': [
            {'timestamp': datetime(2024, 1, 1)}
        ]
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert isinstance(converted['addedAt'], datetime)
    assert converted['addedAt'].tzinfo == timezone.utc
    assert converted['timestamp'].tzinfo == timezone.utc
    assert converted['friends'][0]['timestamp'].tzinfo == timezone.utc

def test_from_firestore_normalizes_naive_datetimes():
    data = {'createdAt': datetime(2024, 1, 1, 12, 0), 'displayName': 'Joe'}
    converted = DateTimeUtils.from_firestore(data)
    assert converted['createdAt'].tzinfo == timezone.utc
    assert converted['displayName'] == 'Joe'

def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
