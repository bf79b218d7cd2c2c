"""Field registry for length-validated structured output.

A single registry drives three things: the JSON Schema sent as the tool
``parameters``, the completeness check run on the returned object, and the
field listing embedded in repair prompts. Asking for a subset of names gives
the repair sub-schema, so the repair call can only return the fields being
fixed.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldSpec:
    """A required free-text field with a minimum stripped length."""

    name: str
    description: str
    min_length: int

    def is_complete(self, value: Any) -> bool:
        return isinstance(value, str) and len(value.strip()) >= self.min_length

    def json_schema(self) -> dict:
        return {
            "type": "string",
            "description": f"{self.description} (mínimo {self.min_length} caracteres)",
        }


class FieldRegistry:
    """Ordered collection of FieldSpec indexed by name."""

    def __init__(
        self,
        fields: Iterable[FieldSpec],
        extra_properties: Mapping[str, dict] | None = None,
        extra_required: Iterable[str] = (),
    ):
        """
        Args:
            fields: Length-validated text fields, in output order
            extra_properties: Additional schema properties outside the length check
            extra_required: Which extra properties are required in the full schema
        """
        self.fields: list[FieldSpec] = list(fields)
        self._by_name: dict[str, FieldSpec] = {f.name: f for f in self.fields}
        if len(self._by_name) != len(self.fields):
            raise ValueError("Duplicate field names in registry")
        self.extra_properties: dict[str, dict] = dict(extra_properties or {})
        self.extra_required: list[str] = list(extra_required)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, name: str) -> FieldSpec:
        return self._by_name[name]

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def schema(self, names: Iterable[str] | None = None) -> dict:
        """JSON Schema object for all fields, or only for ``names``.

        The full schema also carries the extra properties. A subset schema
        holds registry fields only.

        Raises:
            KeyError: a requested name is not in the registry
        """
        if names is None:
            selected = self.fields
            properties = {f.name: f.json_schema() for f in selected}
            properties.update(self.extra_properties)
            required = [f.name for f in selected] + self.extra_required
        else:
            selected = [self._by_name[name] for name in names]
            properties = {f.name: f.json_schema() for f in selected}
            required = [f.name for f in selected]

        return {
            "type": "object",
            "properties": properties,
            "required": required,
            "additionalProperties": False,
        }

    def find_incomplete(self, data: Mapping[str, Any]) -> list[str]:
        """Names of fields that are missing or shorter than their floor, in registry order."""
        return [f.name for f in self.fields if not f.is_complete(data.get(f.name))]

    def describe(self, names: Iterable[str] | None = None) -> str:
        """Bullet list of fields for prompts."""
        selected = self.fields if names is None else [self._by_name[n] for n in names]
        return "\n".join(f"- {f.name}: {f.description} (mínimo {f.min_length} caracteres)" for f in selected)

    def pick(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Registry fields present in ``data``; other keys are dropped."""
        return {name: data[name] for name in self.names if name in data}
