# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package. Intended for `from .internal_types import *`"""

from typing import (
    Dict,
    List,
    Optional,
    Union,
    Any,
    Tuple,
    Type,
    Callable,
    Awaitable,
    Coroutine,
    Mapping,
    Set,
    Iterable,
    AsyncIterator,
    AsyncContextManager,
    TYPE_CHECKING,
    cast,
  )

from typing_extensions import Self

from types import TracebackType

JsonableDict = Dict[str, 'Jsonable']
JsonableList = List['Jsonable']

Jsonable = Union[JsonableDict, JsonableList, str, int, float, bool, None]
