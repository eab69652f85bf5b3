"""Tagged variants that serialize as ``{"kind": ..., <fields>}``."""

from dataclasses import MISSING, asdict, fields
from typing import Any, ClassVar

from render.exceptions import DecodeError


class Tagged:
    """Mixin for dataclass variant families.

    The family root is declared with ``family="..."``; every subclass that
    defines ``kind`` registers itself under it.
    """

    kind: ClassVar[str]
    family: ClassVar[str]
    _kinds: ClassVar[dict[str, type["Tagged"]]]

    def __init_subclass__(cls, family: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if family is not None:
            cls.family = family
            cls._kinds = {}
        elif "kind" in cls.__dict__:
            cls._kinds[cls.kind] = cls

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization, omitting default values."""
        values = asdict(self)  # type: ignore[call-overload]
        data: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            if f.default is not MISSING and values[f.name] == f.default:
                continue
            data[f.name] = values[f.name]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Any:
        """Create a variant from its serialized form.

        Raises:
            DecodeError: If the kind is unknown or the fields do not fit it
        """
        if not isinstance(data, dict):
            raise DecodeError(f"{cls.family}: expected a mapping, got {type(data).__name__}")
        values = dict(data)
        kind = values.pop("kind", None)
        variant = cls._kinds.get(str(kind))
        if variant is None:
            known = ", ".join(sorted(cls._kinds))
            raise DecodeError(f"unknown {cls.family} kind {kind!r} (known: {known})")
        try:
            return variant(**values)
        except TypeError as e:
            raise DecodeError(f"invalid {kind} {cls.family}: {e}") from e

    def describe(self) -> str:
        """Short human-readable description for diagnostics."""
        detail = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items() if k != "kind")
        return f"{self.kind}({detail})"
