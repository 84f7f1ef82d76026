from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from kanban.models import Card, ChecklistItem
from kanban.schemas.checklist import ChecklistItemCreate, ChecklistItemRead, ChecklistItemUpdate
from kanban.database import get_session
from ..services.positions import checklist_positions


router = APIRouter(prefix="/checklist", tags=["Checklist"])
db_session = Depends(get_session)


@router.post("/{card_id}/items", response_model=ChecklistItemRead, status_code=201)
async def add_checklist_item(card_id: str, item: ChecklistItemCreate,
                             session: Session = db_session):
    if not session.get(Card, card_id):
        raise HTTPException(status_code=404, detail="Card not found")
    new_item = ChecklistItem(card_id=card_id, title=item.title)
    checklist_positions.insert(session, new_item, item.position)
    session.commit()
    session.refresh(new_item)
    return new_item


@router.put("/{item_id}", response_model=ChecklistItemRead)
async def update_checklist_item(item_id: str, item: ChecklistItemUpdate,
                                session: Session = db_session):
    item_to_update = session.get(ChecklistItem, item_id)
    if not item_to_update:
        raise HTTPException(status_code=404, detail="Checklist item not found")
    data_to_update = item.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in data_to_update.items():
        setattr(item_to_update, key, value)
    session.add(item_to_update)
    session.commit()
    session.refresh(item_to_update)
    return item_to_update


@router.delete("/{item_id}", status_code=204)
async def delete_checklist_item(item_id: str, session: Session = db_session):
    try:
        checklist_positions.remove(session, item_id)
        session.commit()
    except Exception:
        session.rollback()
        raise
