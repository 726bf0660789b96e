# src/chetana/schemas/common.py
"""Shared schema building blocks."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

TargetType = Literal["post", "comment"]
VoteType = Literal["upvote", "downvote"]
Identifier = Annotated[str, Field(min_length=1, max_length=255)]
PositiveId = Annotated[int, Field(gt=0)]


class RequestModel(BaseModel):
    """Base for JSON bodies sent by the web client.

    The client speaks camelCase; fields are declared snake_case with aliases
    and surrounding whitespace is trimmed. Numeric ids sent where a string is
    expected are accepted as strings.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )
