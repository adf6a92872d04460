"""Unit tests for EventKind and ``general.events`` parsing."""

from __future__ import annotations

import logging

import pytest

from eventrelay.models.mask import EVENT_TOKENS, EventKind, kinds_in, parse_events_mask


class TestEventKind:
    def test_all_is_union_of_kinds(self):
        union = EventKind.NONE
        for kind in EVENT_TOKENS.values():
            union |= kind
        assert union == EventKind.ALL

    def test_kinds_are_distinct_bits(self):
        values = [int(kind) for kind in EVENT_TOKENS.values()]
        assert len(set(values)) == 7
        assert all(v & (v - 1) == 0 for v in values)

    def test_kinds_in(self):
        mask = EventKind.MEDIA | EventKind.SESSION
        assert kinds_in(mask) == [EventKind.SESSION, EventKind.MEDIA]
        assert kinds_in(EventKind.NONE) == []


class TestParseEventsMask:
    """``general.events`` parsing: keywords, token lists, unknown tokens."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_absent_or_blank_leaves_mask(self, value):
        assert parse_events_mask(value) == EventKind.NONE
        assert parse_events_mask(value, EventKind.MEDIA) == EventKind.MEDIA

    @pytest.mark.parametrize("value", ["none", "NONE", " None "])
    def test_none_clears(self, value):
        assert parse_events_mask(value, EventKind.ALL) == EventKind.NONE

    @pytest.mark.parametrize("value", ["all", "ALL", "All"])
    def test_all_sets_universe(self, value):
        assert parse_events_mask(value) == EventKind.ALL

    def test_every_token_maps(self):
        mask = parse_events_mask("sessions,handles,jsep,webrtc,media,plugins,transports")
        assert mask == EventKind.ALL

    def test_tokens_are_case_insensitive(self):
        assert parse_events_mask("SESSIONS,Media") == EventKind.SESSION | EventKind.MEDIA

    def test_duplicates_are_idempotent(self):
        assert parse_events_mask("sessions,sessions,handles") == parse_events_mask(
            "handles,sessions"
        )

    def test_whitespace_and_unknown_tokens(self, caplog):
        with caplog.at_level(logging.WARNING, logger="eventrelay"):
            mask = parse_events_mask("sessions, handles , foo")
        assert mask == EventKind.SESSION | EventKind.HANDLE
        assert "Unknown event type 'foo'" in caplog.text

    def test_unknown_tokens_do_not_change_result(self):
        assert parse_events_mask("media,bogus,,") == parse_events_mask("media")

    def test_empty_tokens_ignored(self):
        assert parse_events_mask(",, ,jsep,") == EventKind.JSEP

    def test_list_is_or_ed_into_current(self):
        assert parse_events_mask("media", EventKind.SESSION) == (
            EventKind.SESSION | EventKind.MEDIA
        )
