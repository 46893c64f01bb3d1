"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """A use case takes one pydantic request carrying the principal and
    returns one pydantic response that the route serializes as-is."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
