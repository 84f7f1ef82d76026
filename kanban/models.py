from datetime import datetime
from sqlalchemy import (UniqueConstraint, CheckConstraint,
                        Column, Integer, ForeignKey, event)
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from uuid import uuid4
from .utils.time import get_time_stamp


DEFAULT_BACKGROUND_COLOR = "#0079bf"


class Board(SQLModel, table=True):
    __tablename__ = 'boards'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(max_length=255, index=True, sa_column_kwargs={"nullable": False})
    background_color: str = Field(default=DEFAULT_BACKGROUND_COLOR, max_length=50)
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    lists: List["BoardList"] = Relationship(
        back_populates='board', passive_deletes=True,
        sa_relationship_kwargs={"order_by": "BoardList.position"})



class BoardList(SQLModel, table=True):
    __tablename__ = 'board_lists'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    board_id: str = Field(
        sa_column=Column(ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    title: str = Field(max_length=255, sa_column_kwargs={"nullable": False})
    position: int = Field(
        sa_column=Column(Integer, CheckConstraint("position >= 0"), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    board: Optional["Board"] = Relationship(back_populates='lists')
    all_cards: List["Card"] = Relationship(back_populates='list', passive_deletes=True)
    # Active cards only, in display order
    cards: List["Card"] = Relationship(
        sa_relationship_kwargs={
            "primaryjoin": "and_(BoardList.id == Card.list_id, Card.archived == False)",
            "order_by": "Card.position",
            "viewonly": True,
        })



class Card(SQLModel, table=True):
    __tablename__ = 'cards'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    list_id: str = Field(
        sa_column=Column(ForeignKey("board_lists.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    title: str = Field(max_length=255, index=True, sa_column_kwargs={"nullable": False})
    description: Optional[str] = Field(default=None)
    position: int = Field(
        sa_column=Column(Integer, CheckConstraint("position >= 0"), nullable=False, index=True)
    )
    due_date: Optional[datetime] = Field(default=None, index=True)
    completed: bool = Field(default=False)
    archived: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    list: Optional["BoardList"] = Relationship(back_populates='all_cards')
    card_labels: List["CardLabel"] = Relationship(back_populates='card', passive_deletes=True)
    card_members: List["CardMember"] = Relationship(back_populates='card', passive_deletes=True)
    checklist_items: List["ChecklistItem"] = Relationship(
        back_populates='card', passive_deletes=True,
        sa_relationship_kwargs={"order_by": "ChecklistItem.position"})



class Label(SQLModel, table=True):
    __tablename__ = 'labels'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=255, index=True, sa_column_kwargs={"nullable": False})
    color: str = Field(max_length=50, sa_column_kwargs={"nullable": False})

    # Relationships
    card_labels: List["CardLabel"] = Relationship(back_populates='label', passive_deletes=True)



class Member(SQLModel, table=True):
    __tablename__ = 'members'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=255, index=True, sa_column_kwargs={"nullable": False})
    email: str = Field(unique=True, index=True, max_length=255)
    avatar_url: Optional[str] = Field(default=None)

    # Relationships
    card_members: List["CardMember"] = Relationship(back_populates='member', passive_deletes=True)



class CardLabel(SQLModel, table=True):
    __tablename__ = 'card_labels'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    card_id: str = Field(
        sa_column=Column(ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    )
    label_id: str = Field(
        sa_column=Column(ForeignKey("labels.id", ondelete="CASCADE"), nullable=False)
    )
    # Defining the UNIQUE constraint on (card_id, label_id)
    __table_args__ = (
        UniqueConstraint("card_id", "label_id", name="unique_card_label"),
    )

    # Relationships
    card: Optional["Card"] = Relationship(back_populates='card_labels')
    label: Optional["Label"] = Relationship(back_populates='card_labels')



class CardMember(SQLModel, table=True):
    __tablename__ = 'card_members'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    card_id: str = Field(
        sa_column=Column(ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    )
    member_id: str = Field(
        sa_column=Column(ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    )
    # Defining the UNIQUE constraint on (card_id, member_id)
    __table_args__ = (
        UniqueConstraint("card_id", "member_id", name="unique_card_member"),
    )

    # Relationships
    card: Optional["Card"] = Relationship(back_populates='card_members')
    member: Optional["Member"] = Relationship(back_populates='card_members')



class ChecklistItem(SQLModel, table=True):
    __tablename__ = 'checklist_items'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    card_id: str = Field(
        sa_column=Column(ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    title: str = Field(max_length=255, sa_column_kwargs={"nullable": False})
    completed: bool = Field(default=False)
    position: int = Field(
        sa_column=Column(Integer, CheckConstraint("position >= 0"), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    card: Optional["Card"] = Relationship(back_populates='checklist_items')




@event.listens_for(SQLModel, "before_update", propagate=True)
def auto_update_timestamp(_, __, target):
    if hasattr(target, "updated_at"):
        target.updated_at = get_time_stamp()
