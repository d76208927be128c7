from __future__ import annotations

from typing import Any, Union

import orjson

__all__ = ["dumps", "loads"]


def dumps(obj: Any, *, indent: bool = False) -> str:
    """Serialize *obj* to a ``str`` using orjson (bytes → str)."""
    option = orjson.OPT_SERIALIZE_NUMPY
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, option=option).decode()


def loads(data: Union[str, bytes, bytearray]) -> Any:
    return orjson.loads(data)
