# pyright: reportAny=false, reportExplicitAny=false
"""Field schemas for validating parsed git output.

A schema declares which labels a field block must (or may) contain and how
each value is coerced. Validation is delegated to a pydantic model built from
the declared fields, and pydantic failures are translated into
GitValidationError so callers only deal with the gitmodel error family.

Example:
    >>> schema = Schema.parse(["commitHash:s", "commitDate:dt", "tagDate:dt?"])
    >>> data = schema.validate(
    ...     {"commitHash": "49c28cc", "commitDate": "2022-01-26T02:51:21-05:00"}
    ... )
    >>> data["tagDate"] is None
    True
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Final, Self

import pendulum
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    ValidationError,
    create_model,
)

from gitmodel.exceptions import GitValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


class FieldKind(StrEnum):
    """Value kinds a schema field can declare, keyed by shorthand."""

    STRING = "s"
    DATETIME = "dt"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declaration of a single schema field.

    Attributes:
        name: The field label as it appears in git output.
        kind: How the value is coerced.
        required: Whether the field must be present.
    """

    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = True

    @classmethod
    def parse(cls, shorthand: str) -> Self:
        """Build a field spec from `name:kind` shorthand, `?` suffix marking optional.

        Args:
            shorthand: A string such as "commitDate:dt" or "tagMessage:s?".

        Returns:
            The parsed FieldSpec.

        Raises:
            ValueError: If the shorthand names an unknown kind.
        """
        name, _, kind = shorthand.partition(":")
        required = not kind.endswith("?")
        kind = kind.removesuffix("?") or FieldKind.STRING.value
        return cls(name=name, kind=FieldKind(kind), required=required)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp that carries an explicit UTC offset.

    Args:
        value: Timestamp text, e.g. "2022-01-26T02:51:21-05:00".

    Returns:
        A timezone-aware datetime.

    Raises:
        ValueError: If the text is not a timestamp or has no offset.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        # pendulum accepts a few ISO-8601 spellings that fromisoformat rejects
        result = pendulum.parse(value, tz=None)
        if not isinstance(result, datetime):
            msg = f"not a date-time: {value!r}"
            raise ValueError(msg) from None
        parsed = datetime.fromisoformat(result.isoformat())

    if parsed.tzinfo is None:
        msg = f"date-time has no UTC offset: {value!r}"
        raise ValueError(msg)
    return parsed


def _coercer(spec: FieldSpec) -> BeforeValidator:
    def coerce(value: Any) -> Any:
        if not spec.required and (value is None or value == ""):
            return None
        if spec.kind is FieldKind.DATETIME and isinstance(value, str):
            return parse_timestamp(value)
        return value

    return BeforeValidator(coerce)


def _field_definition(spec: FieldSpec) -> tuple[Any, Any]:
    annotation: Any = datetime if spec.kind is FieldKind.DATETIME else str
    if spec.required:
        return Annotated[annotation, _coercer(spec)], ...
    return Annotated[annotation | None, _coercer(spec)], None


def _error_message(error: "ErrorDetails") -> tuple[str, str]:  # noqa: UP037
    loc = error.get("loc", ())
    name = ".".join(str(part) for part in loc)
    if error.get("type") == "missing":
        return name, f"Field '{name}' is required."
    return name, f"Field '{name}' is invalid: {error.get('msg', 'Validation error')}."


class Schema:
    """An ordered, composable set of field declarations.

    Schemas are immutable. Combine them with `merge()` rather than by
    subclassing; the result validates the union of both field sets.
    """

    __slots__: Final = ("_conflicts", "_model", "_specs")
    _specs: tuple[FieldSpec, ...]
    _conflicts: tuple[str, ...]
    _model: type[BaseModel] | None

    def __init__(
        self, specs: Iterable[FieldSpec], *, conflicts: Iterable[str] = ()
    ) -> None:
        """Initialize from field specs.

        Args:
            specs: Field declarations in output order.
            conflicts: Names declared inconsistently by merged schemas.
        """
        self._specs = tuple(specs)
        self._conflicts = tuple(conflicts)
        self._model = None

    @classmethod
    def parse(cls, shorthands: Iterable[str]) -> Self:
        """Build a schema from shorthand declarations (see FieldSpec.parse)."""
        return cls(FieldSpec.parse(shorthand) for shorthand in shorthands)

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        """The field declarations in order."""
        return self._specs

    def __repr__(self) -> str:
        names = ", ".join(spec.name for spec in self._specs)
        return f"Schema({names})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._specs == other._specs and self._conflicts == other._conflicts

    def __hash__(self) -> int:
        return hash((self._specs, self._conflicts))

    def merge(self, other: "Schema") -> "Schema":  # noqa: UP037
        """Combine two schemas into one validating both field sets.

        A field declared identically by both schemas appears once. A field
        declared with a different kind or requiredness is recorded as a
        conflict and reported when the merged schema validates.

        Args:
            other: The schema whose fields are appended.

        Returns:
            A new schema.
        """
        by_name = {spec.name: spec for spec in self._specs}
        specs = list(self._specs)
        conflicts = [*self._conflicts, *other._conflicts]
        for spec in other._specs:
            existing = by_name.get(spec.name)
            if existing is None:
                by_name[spec.name] = spec
                specs.append(spec)
            elif existing != spec and spec.name not in conflicts:
                conflicts.append(spec.name)
        return Schema(specs, conflicts=conflicts)

    def validate(self, data: Mapping[str, object]) -> dict[str, Any]:
        """Validate and coerce a parsed field mapping.

        Args:
            data: Mapping produced by parse_field_block().

        Returns:
            Dict with one entry per declared field. Date-time fields hold
            timezone-aware datetimes; absent optional fields hold None.
            Undeclared keys are dropped.

        Raises:
            GitValidationError: If a required field is missing, a value cannot
                be coerced, or the schema was merged from conflicting parts.
        """
        if self._conflicts:
            name = self._conflicts[0]
            msg = f"Field '{name}' is declared with conflicting types."
            raise GitValidationError(msg, field=name)

        try:
            model = self._get_model().model_validate(dict(data))
        except ValidationError as e:
            errors = e.errors()
            field, _ = _error_message(errors[0])
            message = " ".join(_error_message(error)[1] for error in errors)
            raise GitValidationError(message, field=field) from e
        return model.model_dump()

    def _get_model(self) -> type[BaseModel]:
        if self._model is None:
            definitions = {spec.name: _field_definition(spec) for spec in self._specs}
            self._model = create_model(  # pyright: ignore[reportCallIssue]
                "GitFieldBlock",
                __config__=ConfigDict(extra="ignore", frozen=True),
                **definitions,
            )
        return self._model
