"""UserInfo record: profile of the signed-in account, stored beside the plans."""
from datetime import datetime, timezone
from typing import Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserInfo:
    def __init__(self, uid: str, email: str = "", display_name: str = "", provider: str = "anonymous",
                 created_at: Optional[str] = None, last_login_at: Optional[str] = None):
        self.uid = uid
        self.email = email
        self.display_name = display_name
        self.provider = provider
        self.created_at = created_at or _now_iso()
        self.last_login_at = last_login_at or self.created_at

    def touch_login(self):
        self.last_login_at = _now_iso()
        return self

    def __repr__(self) -> str:
        return f"UserInfo({self.uid!r}, {self.email or '-'}, {self.provider})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return UserInfo(
            uid=str(d.get("uid", "")),
            email=d.get("email") or "",
            display_name=d.get("displayName") or "",
            provider=d.get("provider") or "anonymous",
            created_at=d.get("createdAt"),
            last_login_at=d.get("lastLoginAt"),
        )

    def to_dict(self):
        return {
            "email": self.email,
            "displayName": self.display_name,
            "uid": self.uid,
            "createdAt": self.created_at,
            "lastLoginAt": self.last_login_at,
            "provider": self.provider,
        }
