from .db import engine
from .models import Base


def ensure_schema() -> None:
    Base.metadata.create_all(engine)


def drop_schema() -> None:
    Base.metadata.drop_all(engine)
