# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for datetime helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from insighted.utils.datetime import ensure_utc, format_iso, parse_iso, utc_now


def test_utc_now_is_aware():
    assert utc_now().tzinfo == timezone.utc


def test_ensure_utc_assumes_utc_for_naive():
    assert ensure_utc(datetime(2025, 6, 1, 8, 0)) == datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def test_ensure_utc_converts_offsets():
    manila = timezone(timedelta(hours=8))

    assert ensure_utc(datetime(2025, 6, 1, 16, 0, tzinfo=manila)) == datetime(
        2025, 6, 1, 8, 0, tzinfo=timezone.utc
    )


def test_format_and_parse():
    value = datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc)

    assert format_iso(value) == "2025-06-01T08:30:00+00:00"
    assert parse_iso("2025-06-01T08:30:00.000Z") == value
    assert format_iso(None) is None
    assert parse_iso("") is None


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        parse_iso("yesterday")
