from typing import Optional

import pytest

from cloudpaste.models import PasteModel
from cloudpaste.dao.base import PasteBaseDAO
from cloudpaste.dao.exceptions import PasteAlreadyExistsError


class InMemoryPasteDAO(PasteBaseDAO):
    """Dictionary-backed PasteBaseDAO for exercising the paste lifecycle.

    Keys never expire on their own, which models a data store whose TTL sweep
    has not run yet. The TTL each write would have used is kept in `ttls`.
    """

    def __init__(self):
        self.pastes: dict[str, PasteModel] = {}
        self.ttls: dict[str, Optional[int]] = {}
        self.counter = 0

    def insert(self, paste: PasteModel, **kwargs) -> 'InMemoryPasteDAO':
        if paste.paste_id in self.pastes:
            raise PasteAlreadyExistsError(f"Paste with ID '{paste.paste_id}' already exists.")
        return self.put(paste)

    def put(self, paste: PasteModel, now_ms: Optional[int] = None, **kwargs) -> 'InMemoryPasteDAO':
        self.pastes[paste.paste_id] = paste
        self.ttls[paste.paste_id] = paste.ttl_seconds(now_ms)
        return self

    def get(self, paste_id: str, **kwargs) -> PasteModel | None:
        return self.pastes.get(paste_id)

    def delete(self, paste_id: str, **kwargs) -> None:
        self.pastes.pop(paste_id, None)
        self.ttls.pop(paste_id, None)

    def decrement_views(self, paste_id: str, now_ms: int, **kwargs) -> int | None:
        paste = self.pastes.get(paste_id)
        if paste is None or paste.remaining_views is None:
            return None

        remaining_views = paste.remaining_views - 1
        if remaining_views <= 0:
            self.delete(paste_id)
            return None

        self.put(paste.with_remaining_views(remaining_views), now_ms=now_ms)
        return remaining_views

    def count(self, increment: bool = False, **kwargs) -> int:
        if increment:
            self.counter += 1
        return self.counter


@pytest.fixture
def memory_dao() -> InMemoryPasteDAO:
    return InMemoryPasteDAO()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep host environment variables from leaking into tests."""
    for name in ('TEST_MODE', 'BASE_URL', 'ID_SALT', 'APP_NAME', 'APP_ENV', 'AWS_SAM_LOCAL', 'APPCONFIG_AGENT_URL'):
        monkeypatch.delenv(name, raising=False)
