from sqlalchemy.orm import Session
from models.group import Group
from schemas.tournament import GroupCreate
from core.events import changefeed, serialize_row
from core.exceptions import GroupNameTaken


def create_group(db: Session, group_data: GroupCreate):
    if db.query(Group).filter(Group.name == group_data.name).first():
        raise GroupNameTaken(group_data.name)

    db_group = Group(name=group_data.name)
    db.add(db_group)
    db.commit()
    db.refresh(db_group)
    changefeed.publish("groups", "INSERT", new_row=serialize_row(db_group))
    return db_group


def get_group(db: Session, group_id: int):
    return db.query(Group).filter(Group.id == group_id).first()


def get_groups(db: Session):
    return db.query(Group).order_by(Group.id).all()
