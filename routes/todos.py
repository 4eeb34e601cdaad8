from fastapi import APIRouter, Depends, Form, HTTPException, status
from typing import List
from database import TodoStore, get_todo_store, next_todo_id
from models import Todo
from schemas import TodoResponse, StatusResponse
from middleware.auth import verify_jwt_middleware
from utils.logger import get_logger

router = APIRouter(dependencies=[Depends(verify_jwt_middleware)])
logger = get_logger(__name__)


@router.get("/{username}", response_model=List[TodoResponse])
def list_todos(
    username: str,
    todos: TodoStore = Depends(get_todo_store)
) -> List[Todo]:
    """
    Get all todos owned by a user

    Args:
        username: Owner from URL
        todos: Todo store

    Returns:
        The user's todos in file order
    """
    return [todo for todo in todos.load() if todo.username == username]


@router.post("/{username}", response_model=TodoResponse)
def create_todo(
    username: str,
    task: str = Form(..., min_length=1),
    todos: TodoStore = Depends(get_todo_store)
) -> Todo:
    """
    Create a new todo

    Args:
        username: Owner from URL
        task: Task text from the form body
        todos: Todo store

    Returns:
        The created todo
    """
    task = task.strip()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or missing field: task"
        )

    all_todos = todos.load()
    todo = Todo(id=next_todo_id(all_todos), username=username, task=task, done=False)
    all_todos.append(todo)
    todos.save(all_todos)

    logger.info("Todo %d created for %s", todo.id, username)
    return todo


@router.put("/{username}/{todo_id}", response_model=StatusResponse)
def toggle_todo(
    username: str,
    todo_id: int,
    todos: TodoStore = Depends(get_todo_store)
) -> StatusResponse:
    """
    Toggle the done flag of a todo

    Args:
        username: Owner from URL
        todo_id: Todo ID
        todos: Todo store

    Returns:
        StatusResponse with status "updated"
    """
    all_todos = todos.load()
    for todo in all_todos:
        if todo.id == todo_id and todo.username == username:
            todo.done = not todo.done
            break
    else:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="not found"
        )

    todos.save(all_todos)
    return StatusResponse(status="updated")


@router.delete("/{username}/{todo_id}", response_model=StatusResponse)
def delete_todo(
    username: str,
    todo_id: int,
    todos: TodoStore = Depends(get_todo_store)
) -> StatusResponse:
    """
    Delete a todo

    Args:
        username: Owner from URL
        todo_id: Todo ID
        todos: Todo store

    Returns:
        StatusResponse with status "deleted"
    """
    all_todos = todos.load()
    remaining = [
        todo for todo in all_todos
        if not (todo.id == todo_id and todo.username == username)
    ]

    if len(remaining) == len(all_todos):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="not found"
        )

    todos.save(remaining)
    logger.info("Todo %d deleted for %s", todo_id, username)
    return StatusResponse(status="deleted")
