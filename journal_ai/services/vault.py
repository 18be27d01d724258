"""Markdown vault: session files and user settings"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import json
import logging

import yaml

from journal_ai.exceptions import VaultException
from journal_ai.schemas.settings import JournalSettings
from journal_ai.schemas.vault import EntryMetadata

logger = logging.getLogger(__name__)

FRONT_MATTER_FENCE = "---"


def parse_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a markdown file into (front matter, body)

    Files without a leading '---' fence have empty front matter.
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != FRONT_MATTER_FENCE:
        return {}, text

    for i in range(1, len(lines)):
        if lines[i].strip() == FRONT_MATTER_FENCE:
            data = yaml.safe_load("\n".join(lines[1:i])) or {}
            if not isinstance(data, dict):
                raise VaultException("Front matter is not a mapping")
            return data, "\n".join(lines[i + 1:])

    return {}, text


def dump_front_matter(body: str, data: Dict[str, Any]) -> str:
    """Serialise front matter and body into a markdown file"""
    header = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if not body.endswith("\n"):
        body += "\n"
    return f"{FRONT_MATTER_FENCE}\n{header}{FRONT_MATTER_FENCE}\n{body}"


@dataclass
class SaveResult:
    """Outcome of saving a session"""
    filepath: Path
    exists: bool = False
    existing_content: Optional[str] = None
    existing_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SessionFile:
    """A loaded session"""
    content: str
    data: Dict[str, Any]
    date: Optional[str] = None


class VaultManager:
    """Reads and writes the journal vault on disk"""

    def __init__(self, vault_path: Union[str, Path] = "~/JournalAI"):
        self.vault_path = Path(vault_path).expanduser()

    @property
    def sessions_dir(self) -> Path:
        return self.vault_path / "sessions"

    @property
    def settings_path(self) -> Path:
        return self.vault_path / "config" / "settings.json"

    def initialize(self) -> None:
        """Create the vault layout and default settings if missing"""
        for directory in (
            self.vault_path,
            self.sessions_dir,
            self.vault_path / "indices",
            self.vault_path / "config",
        ):
            directory.mkdir(parents=True, exist_ok=True)

        if not self.settings_path.exists():
            self.save_settings(self.get_default_settings())
            logger.info(f"Wrote default settings to {self.settings_path}")

    def get_default_settings(self) -> JournalSettings:
        return JournalSettings(vault_path=str(self.vault_path))

    def session_path(self, day: date) -> Path:
        """sessions/YYYY/MM/YYYY-MM-DD.session.md"""
        return (
            self.sessions_dir
            / f"{day.year:04d}"
            / f"{day.month:02d}"
            / f"{day.isoformat()}.session.md"
        )

    def _read(self, filepath: Path) -> Optional[SessionFile]:
        try:
            text = filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise VaultException(f"Failed to read {filepath}: {e}") from e

        try:
            data, body = parse_front_matter(text)
        except yaml.YAMLError as e:
            raise VaultException(f"Invalid front matter in {filepath}: {e}") from e
        return SessionFile(content=body, data=data)

    def _write(self, filepath: Path, body: str, data: Dict[str, Any]) -> None:
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            filepath.write_text(dump_front_matter(body, data), encoding="utf-8")
        except OSError as e:
            raise VaultException(f"Failed to write {filepath}: {e}") from e

    def save_session(
        self,
        content: str,
        front_matter: Dict[str, Any],
        is_append: bool = False,
        force_overwrite: bool = False,
        now: Optional[datetime] = None
    ) -> SaveResult:
        """
        Save today's session file

        When a session already exists and neither is_append nor
        force_overwrite is set, nothing is written and the existing session
        is returned so the caller can ask what to do.

        Args:
            content: Session body (markdown)
            front_matter: Front matter fields for this save
            is_append: Append to an existing session
            force_overwrite: Replace an existing session
            now: Current time (default: now, UTC)

        Returns:
            SaveResult
        """
        now = now or datetime.now(timezone.utc)
        filepath = self.session_path(now.date())
        existing = self._read(filepath)

        if existing and not is_append and not force_overwrite:
            return SaveResult(
                filepath=filepath,
                exists=True,
                existing_content=existing.content,
                existing_data=existing.data
            )

        final_content = content
        final_front_matter = dict(front_matter)

        if existing and is_append:
            append_timestamp = now.isoformat()
            final_content = (
                existing.content
                + f"\n\n---\n**Appended at {append_timestamp}**\n"
                + content
            )
            final_front_matter = {
                **existing.data,
                **front_matter,
                "duration_seconds": (
                    (existing.data.get("duration_seconds") or 0)
                    + (front_matter.get("duration_seconds") or 0)
                ),
                "appended_sessions": [
                    *(existing.data.get("appended_sessions") or []),
                    {
                        "timestamp": append_timestamp,
                        "duration_seconds": front_matter.get("duration_seconds") or 0,
                        "phase": front_matter.get("phase") or "unknown",
                    },
                ],
            }

        self._write(filepath, final_content, final_front_matter)
        logger.info(f"Saved session {filepath}")
        return SaveResult(filepath=filepath)

    def save_entry(
        self,
        content: str,
        metadata: EntryMetadata,
        now: Optional[datetime] = None
    ) -> Path:
        """
        Append a timed entry to today's session, creating it if needed

        Returns:
            Path of the session file
        """
        now = now or datetime.now(timezone.utc)
        day = now.date()
        filepath = self.session_path(day)
        existing = self._read(filepath)

        try:
            started = datetime.fromisoformat(metadata.started_at.replace("Z", "+00:00"))
        except ValueError:
            started = now
        if started.tzinfo is not None:
            started = started.astimezone(timezone.utc)
        entry_content = f"## {started:%H:%M} - Entry {metadata.entry_number}\n{content}\n"

        if existing:
            final_content = existing.content + "\n---\n\n" + entry_content
            final_front_matter = {
                **existing.data,
                "entries_metadata": [
                    *(existing.data.get("entries_metadata") or []),
                    metadata.model_dump(),
                ],
            }
        else:
            final_content = f"# {day.isoformat()}\n\n{entry_content}"
            final_front_matter = {
                "date": day.isoformat(),
                "entries_metadata": [metadata.model_dump()],
            }

        self._write(filepath, final_content, final_front_matter)
        logger.info(f"Saved entry {metadata.entry_number} to {filepath}")
        return filepath

    def load_session(self, day: date) -> Optional[SessionFile]:
        """Session for a day, or None"""
        session = self._read(self.session_path(day))
        if session is not None:
            session.date = day.isoformat()
        return session

    def get_recent_sessions(self, days: int = 7, today: Optional[date] = None) -> List[SessionFile]:
        """Sessions from the last `days` days, newest first"""
        today = today or datetime.now(timezone.utc).date()
        sessions = []
        for offset in range(days):
            session = self.load_session(today - timedelta(days=offset))
            if session:
                sessions.append(session)
        return sessions

    def iter_session_files(self) -> List[Path]:
        """All session files in the vault, oldest first"""
        return sorted(self.sessions_dir.glob("*/*/*.session.md"))

    def read_session_file(self, filepath: Path) -> Optional[SessionFile]:
        """Load an arbitrary session file, taking its date from the file name"""
        session = self._read(filepath)
        if session is not None:
            session.date = str(session.data.get("date") or filepath.name.split(".")[0])
        return session

    def load_settings(self) -> JournalSettings:
        try:
            return JournalSettings.model_validate_json(self.settings_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise VaultException(f"Settings not found at {self.settings_path}")
        except (OSError, ValueError) as e:
            raise VaultException(f"Failed to load settings: {e}") from e

    def save_settings(self, journal_settings: JournalSettings) -> None:
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            self.settings_path.write_text(
                json.dumps(journal_settings.model_dump(), indent=2),
                encoding="utf-8"
            )
        except OSError as e:
            raise VaultException(f"Failed to save settings: {e}") from e
