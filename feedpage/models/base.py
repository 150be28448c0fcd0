"""Attribute resolution shared by feeds and articles."""

from typing import Any, Callable, ClassVar, Dict, Optional

from pydantic import BaseModel


class Matchable(BaseModel):
    """Model exposing named attributes to the filter evaluator.

    Subclasses list their attributes in ``ATTRIBUTES``, mapping an attribute
    name to a function returning its string value. A name missing from the
    table resolves through ``resolve_missing``, which returns None unless
    overridden. None means "no value" and is distinct from an empty string,
    which is a present value.
    """

    class Config:
        """Pydantic config."""

        populate_by_name = True

    ATTRIBUTES: ClassVar[Dict[str, Callable[[Any], str]]] = {}

    def attribute_value(self, name: str) -> Optional[str]:
        """Resolve attribute ``name`` to its string value, or None if unknown."""
        getter = self.ATTRIBUTES.get(name)
        if getter is None:
            return self.resolve_missing(name)
        return getter(self)

    def resolve_missing(self, name: str) -> Optional[str]:
        """Fallback for names this model does not recognise."""
        return None


def optional_value(value: Optional[str]) -> str:
    """Render an optional field as an attribute value, never absent."""
    return value if value is not None else ""
