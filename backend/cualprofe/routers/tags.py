from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Tag
from ..schemas import TagRead

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[TagRead])
def list_active_tags(db: Session = Depends(get_db)) -> List[Tag]:
    """Tag vocabulary students can pick from when rating."""
    return db.query(Tag).filter(Tag.is_active == True).order_by(Tag.name.asc()).all()
