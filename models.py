from sqlmodel import SQLModel, Field


class User(SQLModel):
    """Registered user; persisted in the users file"""
    username: str = Field(min_length=1)
    # bcrypt hash, never the plaintext
    password: str


class Todo(SQLModel):
    """Todo item owned by a single user; persisted in the todos file"""
    # Unique across the whole store, not per user
    id: int
    username: str
    task: str
    done: bool = Field(default=False)
