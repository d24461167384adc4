from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_for_tenant(self, subdomain: str) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_name(self, *, subdomain: str, batch_name: str) -> Optional[Shift]:
        raise NotImplementedError
