from datetime import datetime
from typing import Optional, List
from pydantic import model_validator
from .base import CamelModel, require_text
from .board_list import FullBoardList


class BoardCreate(CamelModel):
    title: str
    background_color: Optional[str] = None

    @model_validator(mode='after')
    def validate_title(self):
        self.title = require_text(self.title, "Title")
        return self




class BoardRead(CamelModel):
    id: str
    title: str
    background_color: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None




class BoardUpdate(CamelModel):
    title: Optional[str] = None
    background_color: Optional[str] = None




class FullBoard(BoardRead):
    lists: List[FullBoardList] = []
