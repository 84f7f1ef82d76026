from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from kanban.models import Board, BoardList
from kanban.schemas.board_list import (BoardListCreate, BoardListUpdate, BoardListRead,
                                       BoardListPosition, FullBoardList)
from kanban.database import get_session
from ..services.positions import list_positions

router = APIRouter(prefix="/lists", tags=["Lists"])
db_session = Depends(get_session)


def get_list_or_404(list_id: str, session: Session) -> BoardList:
    board_list = session.get(BoardList, list_id)
    if not board_list:
        raise HTTPException(status_code=404, detail="List not found")
    return board_list


@router.post("", response_model=FullBoardList, status_code=201)
async def create_list(board_list: BoardListCreate, session: Session = db_session):
    if not session.get(Board, board_list.board_id):
        raise HTTPException(status_code=404, detail="Board not found")
    new_board_list = BoardList(board_id=board_list.board_id, title=board_list.title)
    list_positions.insert(session, new_board_list, board_list.position)
    session.commit()
    session.refresh(new_board_list)
    return new_board_list


@router.put("/{board_list_id}", response_model=BoardListRead)
async def update_list(board_list_id: str, board_list: BoardListUpdate,
                      session: Session = db_session):
    board_list_to_update = get_list_or_404(board_list_id, session)
    board_list_to_update.title = board_list.title
    session.add(board_list_to_update)
    session.commit()
    session.refresh(board_list_to_update)
    return board_list_to_update


@router.put("/{board_list_id}/position", response_model=BoardListRead)
async def update_list_position(board_list_id: str, data: BoardListPosition,
                               session: Session = db_session):
    board_list = get_list_or_404(board_list_id, session)
    if data.board_id is not None and data.board_id != board_list.board_id:
        raise HTTPException(status_code=400, detail="List does not belong to this board")

    try:
        moved = list_positions.move(session, board_list_id, data.position)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(moved)
    return moved


@router.delete("/{board_list_id}", status_code=204)
async def delete_list(board_list_id: str, session: Session = db_session):
    try:
        list_positions.remove(session, board_list_id)
        session.commit()
    except Exception:
        session.rollback()
        raise
