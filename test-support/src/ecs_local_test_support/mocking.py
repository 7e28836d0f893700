from typing import Any, Callable, Type, TypeVar, cast
from unittest.mock import Mock, create_autospec

T = TypeVar("T")


# Have to use Callable[[], T] instead of Type[T] so T can be abstract
# See https://github.com/python/mypy/issues/4717#issuecomment-2453711357
def mock_class[T](cls: Type[T] | Callable[[], T]) -> T:
    return cast(T, create_autospec(spec=cls, instance=True))


def when_calling(mock: Any) -> 'Stub':
    return Stub(mock)


def verify(mock: Any) -> 'Verification':
    return Verification(mock)


class Stub:
    def __init__(self, mock: Mock):
        self.__mock = mock

    def always_return(self, value: Any) -> None:
        self.__mock.return_value = value

    def respond_with(self, *values: Any) -> None:
        self.__mock.side_effect = values

    def invoke(self, function: Callable[..., Any]) -> None:
        self.__mock.side_effect = function

    def always_raise(self, exception: BaseException) -> None:
        self.__mock.side_effect = exception


class Verification:
    def __init__(self, mock: Mock):
        self.__mock = mock

    def was_not_called(self) -> None:
        self.__mock.assert_not_called()

    def was_called_once(self) -> None:
        self.__mock.assert_called_once()

    def was_called_once_with(self, /, *args: Any, **kwargs: Any) -> None:
        self.__mock.assert_called_once_with(*args, **kwargs)

    def was_called_times(self, expected_call_count: int) -> None:
        assert self.__mock.call_count == expected_call_count, (
            f'Expected {expected_call_count} calls but there were {self.__mock.call_count}'
        )
