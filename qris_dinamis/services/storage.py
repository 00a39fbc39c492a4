"""Storage for the last accepted static QRIS payload."""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import FormatError
from ..models import DEFAULT_SLOT, StaticPayload
from ..validator import is_valid

logger = logging.getLogger("qris_dinamis.storage")


class StaticPayloadRepository(Protocol):
    async def load(self) -> str | None: ...

    async def save(self, payload: str) -> None: ...

    async def clear(self) -> None: ...


def _accept(payload: str) -> str:
    candidate = payload.strip()
    if not is_valid(candidate):
        raise FormatError("Static payload must start with 000201 and contain a single 5802ID record")
    return candidate


class MemoryPayloadRepository:
    """Keeps the payload on the instance; used by tests and single-process tools."""

    def __init__(self, payload: str | None = None):
        self._payload = _accept(payload) if payload else None

    async def load(self) -> str | None:
        return self._payload

    async def save(self, payload: str) -> None:
        self._payload = _accept(payload)

    async def clear(self) -> None:
        self._payload = None


class SqlPayloadRepository:
    def __init__(self, session: AsyncSession, slot: str = DEFAULT_SLOT):
        self.session = session
        self.slot = slot

    async def load(self) -> str | None:
        row = await self.session.get(StaticPayload, self.slot)
        return row.payload if row else None

    async def save(self, payload: str) -> None:
        candidate = _accept(payload)
        row = await self.session.get(StaticPayload, self.slot)
        if row:
            row.payload = candidate
        else:
            self.session.add(StaticPayload(slot=self.slot, payload=candidate))
        await self.session.commit()
        logger.info("static payload saved", extra={"slot": self.slot, "payload_length": len(candidate)})

    async def clear(self) -> None:
        row = await self.session.get(StaticPayload, self.slot)
        if row:
            await self.session.delete(row)
        await self.session.commit()
        logger.info("static payload cleared", extra={"slot": self.slot})
