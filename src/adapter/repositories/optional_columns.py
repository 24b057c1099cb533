from typing import Iterable, List, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import defer
from sqlalchemy.orm.attributes import set_committed_value


class OptionalColumns:
    """
    Columns an older schema may not have.

    Missing columns are deferred out of every SELECT, left out of INSERT and
    UPDATE statements, and read back as None on the loaded entity.
    """

    def __init__(self, entity, missing: Iterable[str] = ()):
        self.entity = entity
        self.missing = tuple(missing)

    def options(self) -> list:
        return [defer(getattr(self.entity, name)) for name in self.missing]

    def fill(self, obj):
        if obj is None:
            return None
        for name in self.missing:
            set_committed_value(obj, name, None)
        return obj

    def fill_all(self, objs: List) -> List:
        for obj in objs:
            self.fill(obj)
        return objs

    def loaded_names(self) -> Optional[List[str]]:
        if not self.missing:
            return None
        return [
            attr.key
            for attr in sa_inspect(self.entity).column_attrs
            if attr.key not in self.missing
        ]

    def before_insert(self, obj) -> None:
        # ORM inserts skip None attributes
        for name in self.missing:
            setattr(obj, name, None)

    def before_update(self, obj) -> None:
        # Drops pending changes so the UPDATE never names a missing column
        self.fill(obj)
