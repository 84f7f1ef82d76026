from datetime import datetime
from typing import Optional, List
from pydantic import model_validator
from .base import CamelModel, require_text
from .card import CardFull


class BoardListCreate(CamelModel):
    board_id: str
    title: str
    position: Optional[int] = None

    @model_validator(mode='after')
    def validate_title(self):
        self.title = require_text(self.title, "Title")
        return self




class BoardListRead(CamelModel):
    id: str
    board_id: str
    title: str
    position: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None




class BoardListUpdate(CamelModel):
    title: str

    @model_validator(mode='after')
    def validate_title(self):
        self.title = require_text(self.title, "Title")
        return self




class BoardListPosition(CamelModel):
    position: int
    board_id: Optional[str] = None



class FullBoardList(BoardListRead):
    cards: List[CardFull] = []
