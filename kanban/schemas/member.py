from typing import Optional
from .base import CamelModel


class MemberRead(CamelModel):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None




class CardMemberCreate(CamelModel):
    member_id: str




class CardMemberRead(CamelModel):
    id: str
    card_id: str
    member_id: str
    member: MemberRead
