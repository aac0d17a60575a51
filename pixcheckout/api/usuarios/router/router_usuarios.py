from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.api.usuarios.schemas.schema_usuario import UserCreate, UserUpdate, UserResponse
from pixcheckout.api.usuarios.services.service_usuario import UserService
from pixcheckout.core.admin_dependencies import require_admin
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/usuarios/admin",
    tags=["Admin - Usuarios"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=UserResponse, status_code=201)
def create_user(request: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create_user(request)


@router.get("", response_model=List[UserResponse])
def list_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return UserService(db).list_users(skip, limit)


@router.get("/{id}", response_model=UserResponse)
def get_user(id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(id)


@router.put("/{id}", response_model=UserResponse)
def update_user(id: int, request: UserUpdate, db: Session = Depends(get_db)):
    return UserService(db).update_user(id, request)


@router.delete("/{id}", status_code=204)
def delete_user(
    id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_admin),
):
    UserService(db).delete_user(id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
