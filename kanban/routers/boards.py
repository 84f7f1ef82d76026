from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from kanban.models import Board, DEFAULT_BACKGROUND_COLOR
from kanban.schemas.board import BoardRead, BoardUpdate, BoardCreate, FullBoard
from kanban.database import get_session
from typing import List


router = APIRouter(prefix="/boards", tags=["Boards"])
db_session = Depends(get_session)


def get_board_or_404(board_id: str, session: Session) -> Board:
    board = session.get(Board, board_id)
    if not board:
        raise HTTPException(status_code=404, detail="Board not found")
    return board


@router.get("", response_model=List[BoardRead])
async def get_boards(session: Session = db_session):
    statement = select(Board).order_by(Board.created_at.desc(), Board.id.asc())
    return session.exec(statement).all()


@router.post("", response_model=BoardRead, status_code=201)
async def create_board(board: BoardCreate, session: Session = db_session):
    new_board = Board(
        title=board.title,
        background_color=board.background_color or DEFAULT_BACKGROUND_COLOR,
    )
    session.add(new_board)
    session.commit()
    session.refresh(new_board)
    return new_board


@router.get("/{board_id}", response_model=FullBoard)
async def get_board(board_id: str, session: Session = db_session):
    return get_board_or_404(board_id, session)


@router.put("/{board_id}", response_model=BoardRead)
async def update_board(board_id: str, board: BoardUpdate,
                       session: Session = db_session):
    board_to_update = get_board_or_404(board_id, session)
    data_to_update = board.model_dump(exclude_unset=True)
    for key, value in data_to_update.items():
        # Empty values leave the current setting untouched
        if value:
            setattr(board_to_update, key, value)
    session.add(board_to_update)
    session.commit()
    session.refresh(board_to_update)
    return board_to_update


@router.delete("/{board_id}", status_code=204)
async def delete_board(board_id: str, session: Session = db_session):
    board_to_delete = get_board_or_404(board_id, session)
    session.delete(board_to_delete)
    session.commit()
