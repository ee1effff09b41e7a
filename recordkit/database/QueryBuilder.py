from typing import Any, List, Optional, Tuple, Type, TYPE_CHECKING

from recordkit.database.Attribute import Attribute
from recordkit.database.Exceptions import RecordNotFound
from recordkit.database.active_record.utils.ModelCollection import ModelCollection

if TYPE_CHECKING:
    from recordkit.core_services.Database import Database
    from recordkit.database.ActiveRecord import ActiveRecord

OPERATORS = ["=", "!=", "<", "<=", ">", ">=", "<>", "LIKE", "IS", "IS NOT"]


class Query:
    """
    SELECT builder for one mapped type.

        Query(Person).where("age", ">", 30).order_by("name").all()
        Query(Book).where("person_id = ?", 7).first()
    """

    def __init__(self, model: Type["ActiveRecord"], connection: Optional["Database"] = None):
        self.model = model
        self.connection = connection or model.connection()
        self.table = model.table_descriptor_for(self.connection)
        self.conditions: List[str] = []
        self.parameters: List[Attribute] = []
        self.order_by_clauses: List[Tuple[str, str]] = []
        self.limit_count: Optional[int] = None

    def where(self, column: str, *args: Any) -> "Query":
        """
        ``where("age", 30)`` compares with ``=``, ``where("age", ">", 30)`` names
        the operator. A clause containing ``?`` binds every remaining argument,
        None included.
        """
        if "?" in column:
            if column.count("?") != len(args):
                raise ValueError(f"Clause '{column}' expects {column.count('?')} parameters, got {len(args)}")
            self.conditions.append(column)
            self.parameters.extend(Attribute.from_native(p) for p in args)
            return self

        if len(args) == 1:
            operator, value = "=", args[0]
        elif len(args) == 2:
            operator, value = args
        else:
            raise ValueError(f"where('{column}', ...) takes a value, or an operator and a value")

        operator = str(operator).upper()
        if operator not in OPERATORS:
            raise ValueError(f"Unsupported operator '{operator}'")

        if value is None:
            self.conditions.append(f"{column} {'IS NOT' if operator in ('!=', '<>', 'IS NOT') else 'IS'} NULL")
        else:
            self.conditions.append(f"{column} {operator} ?")
            self.parameters.append(Attribute.from_native(value))
        return self

    def order_by(self, column: str, direction: str = "asc") -> "Query":
        direction = (direction or "").upper()
        if direction not in ("ASC", "DESC", ""):
            raise ValueError("Direction must be 'ASC', 'DESC', or ''")
        self.order_by_clauses.append((column, direction))
        return self

    def limit(self, count: int) -> "Query":
        self.limit_count = int(count)
        return self

    def to_sql(self) -> str:
        sql = f"SELECT * FROM {self.table.table_name}"
        if self.conditions:
            sql += " WHERE " + " AND ".join(self.conditions)
        if self.order_by_clauses:
            sql += " ORDER BY " + ", ".join(f"{col} {direction}".strip() for col, direction in self.order_by_clauses)
        if self.limit_count is not None:
            sql += f" LIMIT {self.limit_count}"
        return sql

    def get(self) -> Tuple[str, List[Attribute]]:
        return self.to_sql(), self.parameters

    # --------------------------------------------------------------------------
    # Retrieval
    # --------------------------------------------------------------------------

    def all(self) -> ModelCollection:
        rows = self.connection.select_all(*self.get())
        return ModelCollection([self.model.hydrate(row.attributes()) for row in rows])

    def first(self) -> Optional["ActiveRecord"]:
        if not self.order_by_clauses:
            self.order_by(self.table.primary_key, "asc")
        self.limit(1)
        return self.all().first()

    def first_strict(self) -> "ActiveRecord":
        """
        Like first(), but raises if no records found.
        """
        result = self.first()
        if result is None:
            raise RecordNotFound(f"No {self.model.class_name()} matches {' AND '.join(self.conditions) or 'query'}")
        return result

    def __repr__(self):
        return f"<Query {self.to_sql()} {[str(p) for p in self.parameters]}>"
