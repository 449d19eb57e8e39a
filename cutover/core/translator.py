"""
Table-driven translation between backend rows and canonical entities.

Each family declares one field table. The same table drives four mappings:
legacy row -> canonical, canonical -> legacy write payload, hosted row ->
canonical and canonical -> hosted write payload. Adding a field is one Field()
line in the family's table.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from cutover.core.errors import ShapeError

# Legacy path handing the whole legacy row to a converter.
WHOLE_ROW = "."


@dataclass(frozen=True)
class Field:
    """One canonical field and where it lives on each backend.

    `legacy` / `service` default to the canonical name; None means the backend
    does not store the field. Dotted legacy paths address related rows
    (``work_status.current_employer``). `fallback` is a second legacy path read
    when the first one is empty; writes only go to the first.
    """
    name: str
    legacy: Optional[str] = ""
    service: Optional[str] = ""
    fallback: Optional[str] = None
    required: bool = False
    default: Any = None
    factory: Optional[Callable[[], Any]] = None
    read: Optional[Callable[[Any], Any]] = None
    write: Optional[Callable[[Any], Any]] = None
    lossy: bool = False

    @property
    def legacy_path(self) -> Optional[str]:
        return self.name if self.legacy == "" else self.legacy

    @property
    def service_column(self) -> Optional[str]:
        return self.name if self.service == "" else self.service

    def empty(self) -> Any:
        return self.factory() if self.factory else self.default


def resolve(row: Any, path: str) -> Any:
    if path == WHOLE_ROW:
        return row
    value = row
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _assign(payload: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    target = payload
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


class EntityTranslator:
    def __init__(
        self,
        family: str,
        schema: Type[BaseModel],
        fields: Iterable[Field],
        derive: Optional[Dict[str, Callable[[Dict[str, Any]], Any]]] = None,
        legacy_hook: Optional[Callable[[Mapping[str, Any], Dict[str, Any]], None]] = None,
    ):
        self.family = family
        self.schema = schema
        self.fields: Dict[str, Field] = {f.name: f for f in fields}
        self.derive = derive or {}
        self.legacy_hook = legacy_hook

    @property
    def lossy_fields(self) -> FrozenSet[str]:
        """Canonical fields the legacy backend drops or stores at lower fidelity."""
        return frozenset(
            f.name for f in self.fields.values() if f.legacy is None or f.lossy
        )

    @property
    def required_fields(self) -> FrozenSet[str]:
        return frozenset(f.name for f in self.fields.values() if f.required)

    def legacy_column(self, name: str) -> str:
        path = self.fields[name].legacy_path
        if path is None or path == WHOLE_ROW or "." in path:
            raise KeyError(f"{self.family}.{name} is not a plain legacy column")
        return path

    def service_column(self, name: str) -> str:
        column = self.fields[name].service_column
        if column is None:
            raise KeyError(f"{self.family}.{name} is not stored by the hosted backend")
        return column

    # reads

    def to_canonical(self, legacy_row: Any) -> BaseModel:
        id_field = self.fields.get("id")
        entity_id = resolve(legacy_row, id_field.legacy_path) if id_field and id_field.legacy_path else None
        values: Dict[str, Any] = {}
        for f in self.fields.values():
            if f.legacy is None:
                values[f.name] = f.empty()
                continue
            raw = resolve(legacy_row, f.legacy_path)
            if raw is None and f.fallback:
                raw = resolve(legacy_row, f.fallback)
            value = f.read(raw) if f.read else raw
            if value is None:
                if f.required:
                    raise ShapeError(self.family, _as_id(entity_id), f.name)
                value = f.empty()
            values[f.name] = value
        return self._build(values, entity_id)

    def from_service_row(self, row: Mapping[str, Any]) -> BaseModel:
        values: Dict[str, Any] = {}
        for f in self.fields.values():
            column = f.service_column
            value = row.get(column) if column is not None else None
            if value is None:
                if f.required:
                    raise ShapeError(self.family, _as_id(row.get("id")), f.name)
                value = f.empty()
            values[f.name] = value
        return self._build(values, row.get("id"))

    def _build(self, values: Dict[str, Any], entity_id: Any) -> BaseModel:
        for name, compute in self.derive.items():
            values[name] = compute(values)
        try:
            return self.schema.model_validate(values)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "<entity>"
            raise ShapeError(self.family, _as_id(entity_id), field, reason=error["msg"]) from exc

    # writes

    def to_legacy_write(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for name, value in changes.items():
            f = self.fields.get(name)
            if f is None or f.legacy is None or name in self.derive:
                continue
            out = f.write(value) if f.write else value
            if f.legacy_path == WHOLE_ROW:
                payload.update(out or {})
            else:
                _assign(payload, f.legacy_path, out)
        if self.legacy_hook:
            self.legacy_hook(changes, payload)
        return payload

    def to_service_write(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        row: Dict[str, Any] = {}
        for name, value in changes.items():
            f = self.fields.get(name)
            if f is None:
                continue
            column = f.service_column
            if column is None:
                continue
            row[column] = to_jsonable_python(value)
        return row


def _as_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def mapper(table: Mapping[str, str], fallback: Any = None) -> Callable[[Any], Any]:
    """Build a value converter from an explicit vocabulary table."""
    def convert(value: Any) -> Any:
        if value is None or value == "":
            return None
        return table.get(value, fallback)
    return convert
