from .base import CamelModel


class LabelRead(CamelModel):
    id: str
    name: str
    color: str




class CardLabelCreate(CamelModel):
    label_id: str




class CardLabelRead(CamelModel):
    id: str
    card_id: str
    label_id: str
    label: LabelRead
