"""
Connection endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload
from typing import List
import structlog

from pathfinder.api.deps import get_current_user
from pathfinder.core.errors import AuthorizationError, ConflictError, InvalidInputError, NotFoundError
from pathfinder.database.connection import get_database
from pathfinder.models.connection import Connection
from pathfinder.models.user import User
from pathfinder.schemas.base import MessageResponse
from pathfinder.schemas.connection import (
    ConnectionCreate,
    ConnectionMessage,
    ConnectionResponse,
    ConnectionUpdate,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

CONNECTION_NOT_FOUND = "Connection not found."


def _list_connections(db: Session, user: User) -> List[ConnectionResponse]:
    connections = db.query(Connection).options(joinedload(Connection.connected_user)).filter(
        Connection.user_id == user.id
    ).order_by(Connection.id).all()
    return [ConnectionResponse.model_validate(connection) for connection in connections]


def _get_connection(db: Session, connection_id: int, user: User) -> Connection:
    connection = db.get(Connection, connection_id)
    if connection is None:
        raise NotFoundError(CONNECTION_NOT_FOUND)
    if connection.user_id != user.id:
        raise AuthorizationError(CONNECTION_NOT_FOUND)
    return connection

@router.get("/connections", response_model=List[ConnectionResponse])
async def get_connections(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get the caller's connections"""
    return _list_connections(db, user)

@router.get("/connections/{user_id}", response_model=List[ConnectionResponse])
async def get_user_connections(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get connections of a user; only the caller's own are visible"""
    if user_id != user.id:
        raise AuthorizationError(CONNECTION_NOT_FOUND)
    return _list_connections(db, user)

@router.post("/connections", response_model=ConnectionMessage, status_code=status.HTTP_201_CREATED)
async def create_connection(
    connection_data: ConnectionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Connect the caller to another user"""

    if connection_data.connected_user_id == user.id:
        raise InvalidInputError("Cannot connect a user to themselves.")

    if db.get(User, connection_data.connected_user_id) is None:
        raise NotFoundError("User not found.")

    existing_connection = db.query(Connection).filter(
        Connection.user_id == user.id,
        Connection.connected_user_id == connection_data.connected_user_id
    ).first()
    if existing_connection:
        raise ConflictError("Connection already exists.")

    connection = Connection(
        user_id=user.id,
        connected_user_id=connection_data.connected_user_id,
        shared_patterns=connection_data.shared_patterns,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)

    logger.info("Connection created", connection_id=connection.id, connected_user_id=connection.connected_user_id)
    return ConnectionMessage(
        message="Connection created successfully.",
        connection=ConnectionResponse.model_validate(connection),
    )

@router.put("/connections/{connection_id}", response_model=ConnectionMessage)
async def update_connection(
    connection_id: int,
    connection_data: ConnectionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Update the shared patterns of a connection"""

    connection = _get_connection(db, connection_id, user)
    for field, value in connection_data.model_dump(exclude_unset=True).items():
        setattr(connection, field, value)
    db.commit()
    db.refresh(connection)

    return ConnectionMessage(
        message="Connection updated successfully.",
        connection=ConnectionResponse.model_validate(connection),
    )

@router.delete("/connections/{connection_id}", response_model=MessageResponse)
async def delete_connection(
    connection_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Remove a connection"""

    connection = _get_connection(db, connection_id, user)
    db.delete(connection)
    db.commit()

    logger.info("Connection deleted", connection_id=connection_id)
    return MessageResponse(message="Connection deleted successfully.")
