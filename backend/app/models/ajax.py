"""
Response envelope returned to the Ajax client.

The wire format is fixed: ``{"isError": bool, "messages": [str], "data": {}}``.
"""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field


class AjaxResponse(BaseModel):
    """Uniform success/error result of an Ajax request."""
    model_config = {"populate_by_name": True}

    is_error: bool = Field(False, alias="isError")
    messages: List[str] = []
    data: Dict[str, Any] = {}

    @classmethod
    def success(
        cls,
        messages: Union[str, List[str], None] = None,
        data: Dict[str, Any] | None = None,
    ) -> "AjaxResponse":
        return cls(is_error=False, messages=_as_list(messages), data=data or {})

    @classmethod
    def error(
        cls,
        messages: Union[str, List[str]],
        data: Dict[str, Any] | None = None,
    ) -> "AjaxResponse":
        """Error response; ``messages`` may be a single string."""
        return cls(is_error=True, messages=_as_list(messages), data=data or {})

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, include={"is_error", "messages", "data"})


def _as_list(messages: Union[str, List[str], None]) -> List[str]:
    if messages is None:
        return []
    if isinstance(messages, str):
        return [messages]
    return list(messages)
