from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.group_crud import create_group, get_groups
from schemas.tournament import Group, GroupCreate

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.post("/", response_model=Group, status_code=201)
async def create_new_group(group: GroupCreate, db: Session = Depends(get_db)):
    """Create a group"""
    return create_group(db, group)


@router.get("/", response_model=List[Group])
async def list_groups(db: Session = Depends(get_db)):
    return get_groups(db)
