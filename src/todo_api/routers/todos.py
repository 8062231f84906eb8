from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..auth import require_roles
from ..repositories import TodoRepository, get_todo_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

# Every route in this group requires an authenticated session with an allowed role.
router = APIRouter(
    prefix="/todoitems",
    tags=["todoitems"],
    dependencies=[Depends(require_roles())],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Role not allowed"},
    },
)


def _get_repo(repo: TodoRepository = Depends(get_todo_repository)) -> TodoRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo item in id order.",
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(repo: TodoRepository = Depends(_get_repo)) -> List[TodoOut]:
    """
    List all todos.
    """
    return [TodoOut(**item) for item in repo.list()]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: int, repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    item = repo.get(todo_id)
    if not item:
        raise _not_found()
    return TodoOut(**item)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Name is required"},
    },
)
def create_todo(
    payload: TodoCreate,
    response: Response,
    repo: TodoRepository = Depends(_get_repo),
) -> TodoOut:
    """
    Create a new Todo.
    """
    created = repo.create(payload)
    response.headers["Location"] = f"{router.prefix}/{created['id']}"
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace Todo",
    description="Overwrite the name and completion flag of an existing Todo item.",
    responses={
        204: {"description": "Todo updated"},
        400: {"description": "Name is required"},
        404: {"description": "Todo not found"},
    },
)
def put_todo(todo_id: int, payload: TodoUpdate, repo: TodoRepository = Depends(_get_repo)) -> Response:
    """
    Full replace of a Todo item.
    """
    if repo.replace(todo_id, payload) is None:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(_get_repo)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(todo_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
