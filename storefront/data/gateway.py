# storefront/data/gateway.py
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import select, delete, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.data.models import (
    UserModel,
    ProductModel,
    ProductImageModel,
    CartLineModel,
    OrderModel,
    OrderItemModel,
    PaymentLogModel,
    NotificationModel,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND = "NOT_FOUND"
MULTIPLE_ROWS = "MULTIPLE_ROWS"
CONFLICT = "CONFLICT"
DATABASE_ERROR = "DATABASE_ERROR"
UNKNOWN_TABLE = "UNKNOWN_TABLE"

TABLES = {
    "users": UserModel,
    "products": ProductModel,
    "product_images": ProductImageModel,
    "cart": CartLineModel,
    "orders": OrderModel,
    "order_items": OrderItemModel,
    "payment_logs": PaymentLogModel,
    "notifications": NotificationModel,
}


@dataclass
class GatewayError:
    code: str
    message: str


@dataclass
class GatewayResult:
    data: Any = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_found(self) -> bool:
        return self.error is not None and self.error.code == NOT_FOUND


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DataGateway:
    """
    Cienka warstwa nad tabelami:
    -select z filtrami, sortowaniem i paginacja zakresem (from, to wlacznie)
    -insert zwracajacy wiersz(e), update po id, delete po filtrach
    Kazda operacja zwraca GatewayResult(data, error), bledy bazy nie wychodza wyzej.
    Kazdy zapis to osobny commit, brak transakcji na wiele operacji.
    """

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise KeyError(table)
        return model

    def _fail(self, table: str, op: str, exc: SQLAlchemyError) -> GatewayResult:
        self.db.rollback()
        code = CONFLICT if isinstance(exc, IntegrityError) else DATABASE_ERROR
        logger.error(f"Gateway {op} on {table} failed ({code}): {exc}")
        return GatewayResult(error=GatewayError(code, str(exc.orig if getattr(exc, "orig", None) else exc)))

    # =====================================================
    # READ
    # =====================================================
    def select(
        self,
        table: str,
        *,
        eq: Mapping[str, Any] | None = None,
        in_: Mapping[str, Iterable[Any]] | None = None,
        ilike_any: tuple[str, Sequence[str]] | None = None,
        order_by: str | None = "id",
        ascending: bool = True,
        range_: tuple[int, int] | None = None,
        limit: int | None = None,
        single: bool = False,
        embed: Sequence[str] = (),
    ) -> GatewayResult:
        try:
            model = self._model(table)
        except KeyError:
            return GatewayResult(error=GatewayError(UNKNOWN_TABLE, f"Unknown table {table}"))

        stmt = select(model)

        for column, value in (eq or {}).items():
            stmt = stmt.where(getattr(model, column) == value)

        for column, values in (in_ or {}).items():
            stmt = stmt.where(getattr(model, column).in_(list(values)))

        if ilike_any:
            term, columns = ilike_any
            pattern = f"%{_escape_like(term)}%"
            stmt = stmt.where(or_(*(getattr(model, c).ilike(pattern, escape="\\") for c in columns)))

        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.asc() if ascending else column.desc())

        for relation in embed:
            stmt = stmt.options(selectinload(getattr(model, relation)))

        #range jak w postgrest - oba konce wlacznie
        if range_ is not None:
            start, end = range_
            stmt = stmt.offset(start).limit(max(end - start + 1, 0))
        elif limit is not None:
            stmt = stmt.limit(limit)

        try:
            rows = list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            return self._fail(table, "select", e)

        if not single:
            return GatewayResult(data=rows)

        if not rows:
            return GatewayResult(error=GatewayError(NOT_FOUND, f"No row found in {table}"))
        if len(rows) > 1:
            return GatewayResult(error=GatewayError(MULTIPLE_ROWS, f"Multiple rows found in {table}"))
        return GatewayResult(data=rows[0])

    def select_without_children(self, table: str, child_table: str, foreign_key: str) -> GatewayResult:
        """Wiersze `table`, do ktorych nie odwoluje sie zaden wiersz `child_table`."""
        model = self._model(table)
        child = self._model(child_table)
        fk = getattr(child, foreign_key)

        stmt = (
            select(model)
            .outerjoin(child, fk == model.id)
            .where(fk.is_(None))
            .order_by(model.id.asc())
        )
        try:
            return GatewayResult(data=list(self.db.execute(stmt).scalars().all()))
        except SQLAlchemyError as e:
            return self._fail(table, "select", e)

    # =====================================================
    # WRITE
    # =====================================================
    def insert(self, table: str, values: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> GatewayResult:
        try:
            model = self._model(table)
        except KeyError:
            return GatewayResult(error=GatewayError(UNKNOWN_TABLE, f"Unknown table {table}"))

        many = not isinstance(values, Mapping)
        rows = [model(**v) for v in (values if many else [values])]

        try:
            self.db.add_all(rows)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
        except SQLAlchemyError as e:
            return self._fail(table, "insert", e)

        return GatewayResult(data=rows if many else rows[0])

    def update(self, table: str, row_id: Any, values: Mapping[str, Any]) -> GatewayResult:
        try:
            model = self._model(table)
        except KeyError:
            return GatewayResult(error=GatewayError(UNKNOWN_TABLE, f"Unknown table {table}"))

        try:
            row = self.db.get(model, row_id)
            if row is None:
                return GatewayResult(error=GatewayError(NOT_FOUND, f"No row {row_id} in {table}"))

            for key, value in values.items():
                setattr(row, key, value)

            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            return self._fail(table, "update", e)

        return GatewayResult(data=row)

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> GatewayResult:
        if not eq:
            raise ValueError("delete wymaga co najmniej jednego filtra")

        try:
            model = self._model(table)
        except KeyError:
            return GatewayResult(error=GatewayError(UNKNOWN_TABLE, f"Unknown table {table}"))

        stmt = delete(model)
        for column, value in eq.items():
            stmt = stmt.where(getattr(model, column) == value)

        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            return self._fail(table, "delete", e)

        return GatewayResult(data=result.rowcount)
