from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel


class SessionUser(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: str = "customer"


@dataclass
class SessionState:
    user: Optional[SessionUser] = None
    is_loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def sign_in(self, user: SessionUser) -> None:
        self.user = user
        self.is_loading = False

    def sign_out(self) -> None:
        self.user = None
        self.is_loading = False


__all__ = ["SessionState", "SessionUser"]
