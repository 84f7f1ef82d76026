from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select, and_
from kanban.models import Card, Label, CardLabel
from kanban.schemas.label import LabelRead, CardLabelCreate, CardLabelRead
from kanban.database import get_session
from typing import List
from ..exceptions import ConflictError


router = APIRouter(prefix="/labels", tags=["Labels"])
db_session = Depends(get_session)


def find_card_label(session: Session, card_id: str, label_id: str):
    statement = select(CardLabel).where(
        and_(
            CardLabel.card_id == card_id,
            CardLabel.label_id == label_id
        )
    )
    return session.exec(statement).first()


def validate_attachment(session: Session, card_id: str, label_id: str):
    """
    Validates that both the card and label exist and are not yet linked.

    Raises:
        HTTPException: If either the card or the label does not exist.
        ConflictError: If the label is already on the card.
    """
    if not session.get(Card, card_id):
        raise HTTPException(status_code=404, detail="Card not found")

    if not session.get(Label, label_id):
        raise HTTPException(status_code=404, detail="Label not found")

    if find_card_label(session, card_id, label_id):
        raise ConflictError("Label already added to card")


@router.get("", response_model=List[LabelRead])
async def get_labels(session: Session = db_session):
    return session.exec(select(Label).order_by(Label.name)).all()


@router.post("/{card_id}/labels", response_model=CardLabelRead, status_code=201)
async def add_label_to_card(card_id: str, body: CardLabelCreate,
                            session: Session = db_session):
    validate_attachment(session, card_id, body.label_id)
    new_link = CardLabel(card_id=card_id, label_id=body.label_id)
    session.add(new_link)
    session.commit()
    session.refresh(new_link)
    return new_link


@router.delete("/{card_id}/labels/{label_id}", status_code=204)
async def remove_label_from_card(card_id: str, label_id: str,
                                 session: Session = db_session):
    link_to_delete = find_card_label(session, card_id, label_id)
    if not link_to_delete:
        raise HTTPException(status_code=404, detail="Card label not found")
    session.delete(link_to_delete)
    session.commit()
