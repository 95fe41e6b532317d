from typing import Optional

from app.schemas.base import CamelModel


class UserOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
