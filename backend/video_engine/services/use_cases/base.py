"""
Base use case class.

Each use case wraps a single business operation and knows nothing about HTTP.
Routes translate HTTP into request objects, call ``execute`` and map domain
exceptions to status codes; the same use case can be driven from a script or
a test without a web server.

Example:
    >>> class KeywordInspectionUseCase(UseCase[KeywordRequest, KeywordResponse]):
    ...     async def execute(self, request: KeywordRequest) -> KeywordResponse:
    ...         ...
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Base use case abstract class.

    Type Parameters:
        RequestT: Type of the input request object
        ResponseT: Type of the output response object
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Execute the use case and return a response.

        Raises:
            Domain exceptions from ``video_engine.core`` (ValidationError,
            JobNotFoundError, ...). HTTP exceptions are never raised here.
        """
        pass
