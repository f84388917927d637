from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class RequestStateError(RuntimeError):
    pass


class RequestKind(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchFailure:
    message: str

    @classmethod
    def from_error(cls, error: BaseException | str | FetchFailure) -> FetchFailure:
        if isinstance(error, FetchFailure):
            return error
        return cls(message=str(error))


@dataclass(frozen=True)
class RequestState(Generic[T]):
    """Outcome of one asynchronous fetch.

    Exactly one of empty, loading, success or failed. The payload is only
    reachable through ``data`` while in success, and ``match`` makes callers
    handle all four cases.
    """

    kind: RequestKind
    _data: Any = None
    _error: FetchFailure | None = None

    @classmethod
    def empty(cls) -> RequestState[Any]:
        return cls(kind=RequestKind.EMPTY)

    @classmethod
    def loading(cls) -> RequestState[Any]:
        return cls(kind=RequestKind.LOADING)

    @classmethod
    def success(cls, data: T) -> RequestState[T]:
        return cls(kind=RequestKind.SUCCESS, _data=data)

    @classmethod
    def failed(cls, error: BaseException | str | FetchFailure) -> RequestState[Any]:
        return cls(kind=RequestKind.FAILED, _error=FetchFailure.from_error(error))

    @property
    def is_empty(self) -> bool:
        return self.kind is RequestKind.EMPTY

    @property
    def is_loading(self) -> bool:
        return self.kind is RequestKind.LOADING

    @property
    def is_success(self) -> bool:
        return self.kind is RequestKind.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.kind is RequestKind.FAILED

    @property
    def data(self) -> T:
        if self.kind is not RequestKind.SUCCESS:
            raise RequestStateError(f"no data in {self.kind.value} state")
        return self._data

    @property
    def error(self) -> FetchFailure:
        if self.kind is not RequestKind.FAILED or self._error is None:
            raise RequestStateError(f"no error in {self.kind.value} state")
        return self._error

    def match(
        self,
        *,
        empty: Callable[[], R],
        loading: Callable[[], R],
        success: Callable[[T], R],
        failed: Callable[[FetchFailure], R],
    ) -> R:
        if self.kind is RequestKind.EMPTY:
            return empty()
        if self.kind is RequestKind.LOADING:
            return loading()
        if self.kind is RequestKind.SUCCESS:
            return success(self._data)
        if self.kind is RequestKind.FAILED:
            return failed(self.error)
        raise RequestStateError(f"unknown request state: {self.kind!r}")

    def to_dict(self, dump_data: Callable[[T], Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"state": self.kind.value}
        if self.kind is RequestKind.SUCCESS:
            payload["data"] = dump_data(self._data) if dump_data else self._data
        elif self.kind is RequestKind.FAILED:
            payload["error"] = self.error.message
        return payload

    @classmethod
    def from_dict(
        cls, payload: dict[str, Any], load_data: Callable[[Any], T] | None = None
    ) -> RequestState[T]:
        try:
            kind = RequestKind(payload.get("state"))
        except ValueError as exc:
            raise RequestStateError(f"unknown request state: {payload.get('state')!r}") from exc
        if kind is RequestKind.SUCCESS:
            raw = payload.get("data")
            return cls.success(load_data(raw) if load_data else raw)
        if kind is RequestKind.FAILED:
            return cls.failed(str(payload.get("error") or ""))
        if kind is RequestKind.LOADING:
            return cls.loading()
        return cls.empty()


EMPTY_REQUEST: RequestState[Any] = RequestState.empty()
LOADING_REQUEST: RequestState[Any] = RequestState.loading()
