from datetime import datetime, timezone
from sqlmodel import Session
import logging
from .database import engine, init_db
from .models import Board, BoardList, Card, CardLabel, CardMember, ChecklistItem, Label, Member
from .services.positions import list_positions, card_positions, checklist_positions

# Logger
logger = logging.getLogger(__name__)


LABELS = [
    ("Bug", "#eb5a46"),
    ("Feature", "#61bd4f"),
    ("Design", "#f2d600"),
    ("Documentation", "#0079bf"),
    ("High Priority", "#c377e0"),
    ("Low Priority", "#00c2e0"),
]

MEMBERS = [
    ("John Doe", "john@example.com", "0D8ABC", "fff"),
    ("Jane Smith", "jane@example.com", "61BD4F", "fff"),
    ("Bob Johnson", "bob@example.com", "F2D600", "000"),
    ("Alice Williams", "alice@example.com", "EB5A46", "fff"),
]

# list title -> cards as (title, description, due date, labels, members, checklist)
CARDS = {
    "To Do": [
        ("Design new landing page",
         "Create mockups for the new landing page with modern design",
         datetime(2026, 2, 10, tzinfo=timezone.utc), ["Design"], ["jane@example.com"],
         [("Research competitors", True), ("Create wireframes", False),
          ("Design mockups", False)]),
        ("Fix authentication bug",
         "Users are unable to login with Google OAuth",
         datetime(2026, 2, 5, tzinfo=timezone.utc), ["Bug", "High Priority"], ["john@example.com"], []),
    ],
    "In Progress": [
        ("Implement drag and drop",
         "Add drag and drop functionality for cards and lists",
         None, ["Feature"], ["john@example.com", "bob@example.com"],
         [("Install drag and drop library", True), ("Implement list drag and drop", True),
          ("Implement card drag and drop", False), ("Test on mobile devices", False)]),
    ],
    "Review": [
        ("Update API documentation",
         "Add documentation for new endpoints",
         None, ["Documentation"], ["alice@example.com"], []),
    ],
    "Done": [
        ("Setup CI/CD pipeline",
         "Configure GitHub Actions for automated deployment",
         None, ["Feature"], ["bob@example.com"],
         [("Setup GitHub Actions", True), ("Configure deployment", True),
          ("Test pipeline", True)]),
        ("Database schema design",
         "Design and implement database schema for the application",
         None, ["Feature"], ["john@example.com", "jane@example.com"], []),
    ],
}


def avatar_url(name: str, background: str, color: str) -> str:
    return (f"https://ui-avatars.com/api/?name={name.replace(' ', '+')}"
            f"&background={background}&color={color}")


def seed_database(session: Session) -> Board:
    labels = {name: Label(name=name, color=color) for name, color in LABELS}
    members = {
        email: Member(name=name, email=email, avatar_url=avatar_url(name, background, color))
        for name, email, background, color in MEMBERS
    }
    session.add_all([*labels.values(), *members.values()])
    logger.info("Created labels and members")

    board = Board(title="Project Management Board")
    session.add(board)
    session.flush()

    for list_title, cards in CARDS.items():
        board_list = BoardList(board_id=board.id, title=list_title)
        list_positions.insert(session, board_list)
        session.flush()

        for title, description, due_date, label_names, member_emails, items in cards:
            card = Card(list_id=board_list.id, title=title,
                        description=description, due_date=due_date)
            card_positions.insert(session, card)
            session.flush()
            session.add_all([CardLabel(card_id=card.id, label_id=labels[name].id)
                             for name in label_names])
            session.add_all([CardMember(card_id=card.id, member_id=members[email].id)
                             for email in member_emails])
            for item_title, completed in items:
                checklist_positions.insert(
                    session, ChecklistItem(card_id=card.id, title=item_title, completed=completed))
                session.flush()

    session.commit()
    logger.info(f"Seeded board {board.id} with {len(CARDS)} lists")
    return board


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    with Session(engine) as seed_session:
        seed_database(seed_session)
