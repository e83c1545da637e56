from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import Float, Integer, String
from uuid6 import uuid7


class Base(DeclarativeBase):
    pass


def new_record_id() -> str:
    return str(uuid7())


class Task(Base):
    """Catalog entry. Loaded once, read-only for the task use cases."""
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    reward = Column(Float, nullable=False, default=0.0)


class TaskActive(Base):
    __tablename__ = "active_tasks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    reward = Column(Float, nullable=False, default=0.0)
    # full timestamp string; the first 10 characters are the rotation day
    timestamp = Column(String, nullable=False)


class TaskCompletionRecord(Base):
    __tablename__ = "task_completion_records"
    id = Column(String, primary_key=True, default=new_record_id)
    account_id = Column(String, index=True, nullable=False)
    timestamp = Column(String, nullable=False)
    task = Column(String, nullable=False)
    image = Column(String, nullable=False)


class Account(Base):
    """Only the columns the task use cases read: session lookup and balance."""
    __tablename__ = "accounts"
    account_id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True)
    session_id = Column(String, index=True, nullable=True)
    balance = Column(Float, nullable=False, default=0.0)
