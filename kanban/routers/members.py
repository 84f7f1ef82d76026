from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select, and_
from kanban.models import Card, Member, CardMember
from kanban.schemas.member import MemberRead, CardMemberCreate, CardMemberRead
from kanban.database import get_session
from typing import List
from ..exceptions import ConflictError


router = APIRouter(prefix="/members", tags=["Members"])
db_session = Depends(get_session)


def find_card_member(session: Session, card_id: str, member_id: str):
    statement = select(CardMember).where(
        and_(
            CardMember.card_id == card_id,
            CardMember.member_id == member_id
        )
    )
    return session.exec(statement).first()


def validate_assignment(session: Session, card_id: str, member_id: str):
    """
    Validates that both the card and member exist before creating a new assignment.

    Args:
        session (Session): The database session.
        card_id (str): ID of the card to validate.
        member_id (str): ID of the member to validate.

    Raises:
        HTTPException: If either the card or the member does not exist.
        ConflictError: If the member is already assigned.
    """
    if not session.get(Card, card_id):
        raise HTTPException(status_code=404, detail="Card not found")

    if not session.get(Member, member_id):
        raise HTTPException(status_code=404, detail="Member not found")

    if find_card_member(session, card_id, member_id):
        raise ConflictError("Member already assigned to card")


@router.get("", response_model=List[MemberRead])
async def get_members(session: Session = db_session):
    return session.exec(select(Member).order_by(Member.name)).all()


@router.post("/{card_id}/members", response_model=CardMemberRead, status_code=201)
async def assign_member_to_card(card_id: str, body: CardMemberCreate,
                                session: Session = db_session):
    validate_assignment(session, card_id, body.member_id)
    new_link = CardMember(card_id=card_id, member_id=body.member_id)
    session.add(new_link)
    session.commit()
    session.refresh(new_link)
    return new_link


@router.delete("/{card_id}/members/{member_id}", status_code=204)
async def unassign_member_from_card(card_id: str, member_id: str,
                                    session: Session = db_session):
    link_to_delete = find_card_member(session, card_id, member_id)
    if not link_to_delete:
        raise HTTPException(status_code=404, detail="Card member not found")
    session.delete(link_to_delete)
    session.commit()
