from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session
import sqlite3
import os

# Load environment variables
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kanban.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Create the database engine
engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)


# SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, _):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Function to get a database session
async def get_session():
    session = Session(engine, autoflush=False)
    try:
        yield session
    finally:
        session.close()


# Function to create tables
def init_db(bind: Engine = engine):
    SQLModel.metadata.create_all(bind)
