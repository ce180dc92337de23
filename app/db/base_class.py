# /app/db/base_class.py

import re

from sqlalchemy.orm import declarative_base, declared_attr


class _TableNameMixin:
    """
    Derives a default table name from the class name, e.g. `ExamQuestion`
    becomes `exam_questions`. Models whose table name does not follow the
    plural rule set `__tablename__` explicitly.
    """

    @declared_attr
    def __tablename__(cls) -> str:
        snake = re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()
        return f"{snake}es" if snake.endswith("s") else f"{snake}s"


Base = declarative_base(cls=_TableNameMixin)
