from datetime import datetime
from typing import Optional
from pydantic import model_validator
from .base import CamelModel, require_text


class ChecklistItemCreate(CamelModel):
    title: str
    position: Optional[int] = None

    @model_validator(mode='after')
    def validate_title(self):
        self.title = require_text(self.title, "Title")
        return self




class ChecklistItemRead(CamelModel):
    id: str
    card_id: str
    title: str
    completed: bool
    position: int
    created_at: Optional[datetime] = None




class ChecklistItemUpdate(CamelModel):
    title: Optional[str] = None
    completed: Optional[bool] = None

    @model_validator(mode='after')
    def validate_title(self):
        if self.title is not None:
            self.title = require_text(self.title, "Title")
        return self
