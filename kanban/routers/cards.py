from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select
from kanban.models import BoardList, Card, CardLabel, CardMember
from kanban.schemas.card import (CardCreate, CardUpdate, CardFull, CardDetail, CardRead,
                                 CardSearchResult, MoveCardRequest, ArchiveCardRequest)
from kanban.database import get_session
from typing import List, Optional
import logging
from ..services.positions import card_positions
from ..utils.time import to_utc_aware


router = APIRouter(prefix="/cards", tags=["Cards"])
db_session = Depends(get_session)

# Logger
logger = logging.getLogger(__name__)


def get_card_or_404(card_id: str, session: Session) -> Card:
    card = session.get(Card, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


def split_ids(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@router.post("", response_model=CardFull, status_code=201)
async def create_card(card: CardCreate, session: Session = db_session):
    if not session.get(BoardList, card.list_id):
        raise HTTPException(status_code=404, detail="List not found")
    new_card = Card(list_id=card.list_id, title=card.title,
                    description=card.description or None)
    card_positions.insert(session, new_card, card.position)
    session.commit()
    session.refresh(new_card)
    return new_card


@router.get("/search/query", response_model=List[CardSearchResult])
async def search_cards(
    q: Optional[str] = Query(None),
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: Session = db_session
):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    statement = (
        select(Card)
        .join(BoardList, BoardList.id == Card.list_id)
        .where(Card.archived == False)
        .where(Card.title.icontains(q.strip(), autoescape=True))
    )
    if board_id:
        statement = statement.where(BoardList.board_id == board_id)
    statement = statement.order_by(BoardList.position, Card.position)
    return session.exec(statement).all()


@router.get("/filter/query", response_model=List[CardSearchResult])
async def filter_cards(
    board_id: Optional[str] = Query(None, alias="boardId"),
    label_ids: Optional[str] = Query(None, alias="labelIds"),
    member_ids: Optional[str] = Query(None, alias="memberIds"),
    due_date_from: Optional[datetime] = Query(None, alias="dueDateFrom"),
    due_date_to: Optional[datetime] = Query(None, alias="dueDateTo"),
    session: Session = db_session
):
    if not board_id:
        raise HTTPException(status_code=400, detail="Board ID is required")

    statement = (
        select(Card)
        .join(BoardList, BoardList.id == Card.list_id)
        .where(BoardList.board_id == board_id, Card.archived == False)
    )

    # A card matches a label or member set when it carries any of them
    labels = split_ids(label_ids)
    if labels:
        statement = statement.where(Card.id.in_(
            select(CardLabel.card_id).where(CardLabel.label_id.in_(labels))
        ))
    members = split_ids(member_ids)
    if members:
        statement = statement.where(Card.id.in_(
            select(CardMember.card_id).where(CardMember.member_id.in_(members))
        ))
    if due_date_from:
        statement = statement.where(Card.due_date >= to_utc_aware(due_date_from))
    if due_date_to:
        statement = statement.where(Card.due_date <= to_utc_aware(due_date_to))

    statement = statement.order_by(BoardList.position, Card.position)
    return session.exec(statement).all()


@router.get("/{card_id}", response_model=CardDetail)
async def get_card(card_id: str, session: Session = db_session):
    return get_card_or_404(card_id, session)


@router.put("/{card_id}", response_model=CardFull)
async def update_card(card_id: str, card: CardUpdate, session: Session = db_session):
    card_to_update = get_card_or_404(card_id, session)
    data_to_update = card.model_dump(exclude_unset=True)
    if data_to_update.get("due_date") is not None:
        data_to_update["due_date"] = to_utc_aware(data_to_update["due_date"])
    for key, value in data_to_update.items():
        if key in ("title", "completed") and value is None:
            continue
        setattr(card_to_update, key, value)
    session.add(card_to_update)
    session.commit()
    session.refresh(card_to_update)
    return card_to_update


@router.put("/{card_id}/move", response_model=CardFull)
async def move_card(card_id: str, data: MoveCardRequest, session: Session = db_session):
    card = get_card_or_404(card_id, session)
    if card.archived:
        raise HTTPException(status_code=400, detail="Archived cards cannot be moved")

    board_list = session.get(BoardList, data.list_id)
    if not board_list:
        raise HTTPException(status_code=404, detail="List not found")

    # Ensure card stays within the same board
    if card.list.board_id != board_list.board_id:
        raise HTTPException(status_code=400, detail="Card cannot be moved to another board")

    # Update card with transaction safety
    try:
        moved = card_positions.move(session, card_id, data.position, data.list_id)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(moved)
    return moved


@router.put("/{card_id}/archive", response_model=CardRead)
async def archive_card(card_id: str, data: ArchiveCardRequest,
                       session: Session = db_session):
    card = get_card_or_404(card_id, session)
    if card.archived == data.archived:
        return card

    try:
        if data.archived:
            # Leaves the active sequence; its stored position goes stale
            card_positions.detach(session, card)
            card.archived = True
        else:
            card.position = card_positions.next_position(session, card.list_id)
            card.archived = False
        session.add(card)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Card {card.id} {'archived' if data.archived else 'restored'}")
    session.refresh(card)
    return card


@router.delete("/{card_id}", status_code=204)
async def delete_card(card_id: str, session: Session = db_session):
    get_card_or_404(card_id, session)
    try:
        card_positions.remove(session, card_id)
        session.commit()
    except Exception:
        session.rollback()
        raise
