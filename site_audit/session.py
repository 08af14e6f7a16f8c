"""Run identity and output-directory allocation."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from site_audit.config import CATEGORIES, RESULTS_ROOT
from site_audit.errors import ConfigurationError

logger = logging.getLogger(__name__)


def generate_session_id(now: datetime | None = None) -> str:
    """Seconds-precision UTC timestamp with path-unsafe characters normalized."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S")


class Session(BaseModel):
    """One timestamped run; passed explicitly into every crawler call."""

    model_config = ConfigDict(frozen=True)

    id: str
    root: Path = Path(RESULTS_ROOT)

    @property
    def directory(self) -> Path:
        return self.root / self.id

    def output_directory(self, category: str) -> Path:
        if category not in CATEGORIES:
            raise ConfigurationError(f"Unknown result category '{category}'")
        path = self.directory / category
        path.mkdir(parents=True, exist_ok=True)
        return path


class SessionManager:
    """Hands out the single Session of a run.

    The first ``initialize()`` fixes the id; every later call returns the same
    Session, so crawlers invoked independently still share one output tree.
    """

    def __init__(self, root: str | Path = RESULTS_ROOT):
        self.root = Path(root)
        self._session: Session | None = None

    def initialize(self) -> Session:
        if self._session is None:
            self._session = Session(id=generate_session_id(), root=self.root)
            logger.info("session initialized", extra={"session_id": self._session.id})
        return self._session

    async def claim(self, poll_seconds: float = 0.1) -> Session:
        """Like ``initialize()`` but only returns an id whose directory did not exist yet.

        The directory is created here, so a later run in the same second waits
        for the next id instead of writing into this session's tree.
        """
        while self._session is None:
            session = Session(id=generate_session_id(), root=self.root)
            try:
                session.directory.mkdir(parents=True)
            except FileExistsError:
                await asyncio.sleep(poll_seconds)
                continue
            self._session = session
            logger.info("session initialized", extra={"session_id": session.id})
        return self._session

    @property
    def session(self) -> Session:
        return self.initialize()
