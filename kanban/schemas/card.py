from datetime import datetime
from typing import Optional, List
from pydantic import model_validator
from .base import CamelModel, require_text
from .label import CardLabelRead
from .member import CardMemberRead
from .checklist import ChecklistItemRead


class CardCreate(CamelModel):
    list_id: str
    title: str
    description: Optional[str] = None
    position: Optional[int] = None

    @model_validator(mode='after')
    def validate_title(self):
        self.title = require_text(self.title, "Title")
        return self




class CardRead(CamelModel):
    id: str
    list_id: str
    title: str
    description: Optional[str] = None
    position: int
    due_date: Optional[datetime] = None
    completed: bool
    archived: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None




class CardUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None

    @model_validator(mode='after')
    def validate_title(self):
        if self.title is not None:
            self.title = require_text(self.title, "Title")
        return self




class MoveCardRequest(CamelModel):
    list_id: str
    position: int




class ArchiveCardRequest(CamelModel):
    archived: bool




class CardFull(CardRead):
    card_labels: List[CardLabelRead] = []
    card_members: List[CardMemberRead] = []
    checklist_items: List[ChecklistItemRead] = []




class CardBoardSummary(CamelModel):
    id: str
    title: str
    background_color: str



class CardListSummary(CamelModel):
    id: str
    board_id: str
    title: str
    position: int




class CardListWithBoard(CardListSummary):
    board: CardBoardSummary




class CardDetail(CardFull):
    list: CardListWithBoard




class CardSearchResult(CardFull):
    list: CardListSummary
