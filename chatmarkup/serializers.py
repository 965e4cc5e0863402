"""Value serializers used to turn replacement values into JSON text."""

from __future__ import annotations

import dataclasses
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class JsonSerializer:
    """
    Converts values of the declared ``types`` to a JSON string.

    Subclasses implement ``to_json``. ``serialize`` never raises: any failure
    is logged and replaced by ``failure_message``.
    """

    types: Tuple[type, ...] = ()
    failure_message = "(failed to convert value to JSON)"

    def to_json(self, value: Any) -> str:
        raise NotImplementedError

    def serialize(self, value: Any) -> str:
        try:
            result = self.to_json(value)
        except Exception:
            logger.warning(
                "%s failed to serialize %s", type(self).__name__, type(value).__name__, exc_info=True
            )
            return self.failure_message
        if not isinstance(result, str):
            logger.warning(
                "%s returned %s instead of str", type(self).__name__, type(result).__name__
            )
            return self.failure_message
        return result


class JsonDumpsSerializer(JsonSerializer):
    """Serializes mappings, lists, tuples and dataclass instances with ``json.dumps``."""

    failure_message = "(failed to convert object to JSON)"

    def __init__(self, *types: type, sort_keys: bool = False) -> None:
        self.types = types or (dict, list, tuple)
        self._sort_keys = sort_keys

    def to_json(self, value: Any) -> str:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)
        return json.dumps(value, sort_keys=self._sort_keys, separators=(",", ":"))


class SerializerRegistry:
    """Read-only lookup from runtime type to serializer."""

    def __init__(self, serializers: Iterable[JsonSerializer] = ()) -> None:
        table: Dict[type, JsonSerializer] = {}
        for serializer in serializers:
            if not isinstance(serializer, JsonSerializer):
                raise TypeError(
                    f"serializer must be a JsonSerializer, got {type(serializer).__name__}"
                )
            if not serializer.types:
                raise ValueError(f"{type(serializer).__name__} declares no types")
            for value_type in serializer.types:
                if not isinstance(value_type, type):
                    raise TypeError(f"{value_type!r} is not a type")
                table[value_type] = serializer
        self._table: Mapping[type, JsonSerializer] = MappingProxyType(table)

    def __len__(self) -> int:
        return len(self._table)

    def __bool__(self) -> bool:
        return bool(self._table)

    def get(self, value_type: type) -> Optional[JsonSerializer]:
        """Exact type first, then the closest registered base class."""
        serializer = self._table.get(value_type)
        if serializer is not None:
            return serializer
        for base in value_type.__mro__[1:]:
            serializer = self._table.get(base)
            if serializer is not None:
                return serializer
        return None

    def to_text(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, str):
            return value
        serializer = self.get(type(value)) if self._table else None
        if serializer is None:
            return str(value)
        return serializer.serialize(value)
