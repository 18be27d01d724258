"""Test the markdown vault"""

from datetime import date, datetime, timezone

import pytest

from journal_ai.exceptions import VaultException
from journal_ai.schemas.settings import JournalSettings
from journal_ai.schemas.vault import EntryMetadata
from journal_ai.services.journal_service import content_hash, index_session_file
from journal_ai.services.vault import dump_front_matter, parse_front_matter

MORNING = datetime(2024, 3, 5, 8, 0, tzinfo=timezone.utc)
EVENING = datetime(2024, 3, 5, 21, 0, tzinfo=timezone.utc)


def test_initialize_creates_layout_and_settings(vault):
    assert vault.sessions_dir.is_dir()
    assert (vault.vault_path / "indices").is_dir()
    assert vault.settings_path.exists()
    assert vault.load_settings().vault_path == str(vault.vault_path)


def test_settings_round_trip(vault):
    custom = JournalSettings(model="claude-3-5-sonnet-20241022", llm_backend="anthropic", tone="blunt")
    vault.save_settings(custom)

    assert vault.load_settings() == custom


def test_corrupt_settings_raise(vault):
    vault.settings_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(VaultException):
        vault.load_settings()


def test_session_path_layout(vault):
    path = vault.session_path(date(2024, 3, 5))
    assert path == vault.sessions_dir / "2024" / "03" / "2024-03-05.session.md"


def test_front_matter_round_trip():
    text = dump_front_matter("# Hello\nbody", {"date": "2024-03-05", "tags": ["a", "b"]})
    data, body = parse_front_matter(text)

    assert data == {"date": "2024-03-05", "tags": ["a", "b"]}
    assert body == "# Hello\nbody\n"


def test_text_without_front_matter():
    assert parse_front_matter("plain\ntext") == ({}, "plain\ntext")


def test_save_new_session(vault):
    result = vault.save_session("# Day\nfirst", {"date": "2024-03-05", "duration_seconds": 60}, now=MORNING)

    assert result.exists is False
    session = vault.load_session(date(2024, 3, 5))
    assert session.content.strip() == "# Day\nfirst"
    assert session.data["duration_seconds"] == 60
    assert session.date == "2024-03-05"


def test_existing_session_is_not_overwritten_without_flags(vault):
    vault.save_session("first", {"date": "2024-03-05"}, now=MORNING)

    result = vault.save_session("second", {"date": "2024-03-05"}, now=EVENING)

    assert result.exists is True
    assert result.existing_content.strip() == "first"
    assert vault.load_session(date(2024, 3, 5)).content.strip() == "first"


def test_append_merges_content_and_duration(vault):
    vault.save_session("first", {"date": "2024-03-05", "duration_seconds": 60}, now=MORNING)

    vault.save_session(
        "second",
        {"date": "2024-03-05", "duration_seconds": 30, "phase": "closing"},
        is_append=True,
        now=EVENING
    )

    session = vault.load_session(date(2024, 3, 5))
    assert "first" in session.content
    assert "**Appended at 2024-03-05T21:00:00+00:00**" in session.content
    assert session.content.strip().endswith("second")
    assert session.data["duration_seconds"] == 90
    assert session.data["appended_sessions"] == [
        {"timestamp": "2024-03-05T21:00:00+00:00", "duration_seconds": 30, "phase": "closing"}
    ]


def test_force_overwrite_replaces_session(vault):
    vault.save_session("first", {"date": "2024-03-05"}, now=MORNING)
    vault.save_session("second", {"date": "2024-03-05"}, force_overwrite=True, now=EVENING)

    assert vault.load_session(date(2024, 3, 5)).content.strip() == "second"


def test_entries_accumulate_in_one_session(vault):
    first = EntryMetadata(entry_number=1, started_at="2024-03-05T09:30:00Z", word_count=3)
    second = EntryMetadata(entry_number=2, started_at="2024-03-05T10:15:00Z", word_count=2)

    vault.save_entry("first entry text", first, now=MORNING)
    path = vault.save_entry("second entry", second, now=MORNING)

    session = vault.read_session_file(path)
    assert session.content.startswith("# 2024-03-05")
    assert "## 09:30 - Entry 1\nfirst entry text" in session.content
    assert "## 10:15 - Entry 2\nsecond entry" in session.content
    assert [m["entry_number"] for m in session.data["entries_metadata"]] == [1, 2]
    assert session.date == "2024-03-05"


def test_recent_sessions_newest_first(vault):
    for day in (1, 3, 4):
        vault.save_session(f"day {day}", {"date": f"2024-03-0{day}"}, now=datetime(2024, 3, day, tzinfo=timezone.utc))

    recent = vault.get_recent_sessions(days=3, today=date(2024, 3, 4))

    assert [s.date for s in recent] == ["2024-03-04", "2024-03-03"]
    assert len(vault.iter_session_files()) == 3


def test_missing_session_is_none(vault):
    assert vault.load_session(date(1999, 1, 1)) is None


@pytest.mark.asyncio
async def test_index_session_file(vault, rag):
    result = vault.save_session("# Evening\nTired but productive.", {"date": "2024-03-05"}, now=EVENING)

    assert await index_session_file(rag, vault, result.filepath) is True

    candidates = await rag.store.fetch_candidates()
    assert len(candidates) == 1
    assert candidates[0].date == "2024-03-05"
    assert candidates[0].heading == "Evening"


@pytest.mark.asyncio
async def test_index_missing_session_file(vault, rag):
    missing = vault.session_path(date(2024, 1, 1))
    assert await index_session_file(rag, vault, missing) is False


def test_content_hash_is_stable():
    assert content_hash("abc") == content_hash("abc")
    assert content_hash("abc") != content_hash("abd")
