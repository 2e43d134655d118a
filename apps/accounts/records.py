from dataclasses import asdict, dataclass
from typing import Optional

from apps.core.formatting import to_int


@dataclass
class User:
    id: Optional[int] = None
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    gender: str = ""
    photo: str = ""
    is_admin: bool = False
    token: str = ""

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "User":
        data = data or {}
        # the API has shipped both spellings of the admin flag
        if "isAdmin" in data:
            is_admin = bool(data.get("isAdmin"))
        else:
            is_admin = bool(data.get("is_admin", False))

        first_name = data.get("first_name") or ""
        last_name = data.get("last_name") or ""
        name = data.get("name") or f"{first_name} {last_name}".strip()

        return cls(
            id=to_int(data.get("id")),
            name=name,
            first_name=first_name,
            last_name=last_name,
            username=data.get("username") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
            gender=data.get("gender") or "",
            photo=data.get("photo") or data.get("image") or "",
            is_admin=is_admin,
            token=data.get("token") or "",
        )

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email

    def as_dict(self) -> dict:
        return asdict(self)

    def merged(self, data: Optional[dict]) -> "User":
        """Overlay a fresher API payload on top of this record, keeping the token."""
        base = {k: v for k, v in self.as_dict().items() if v not in (None, "")}
        base["isAdmin"] = self.is_admin
        if isinstance(data, dict):
            base.update({k: v for k, v in data.items() if v not in (None, "")})
        user = User.from_api(base)
        user.token = self.token
        return user
