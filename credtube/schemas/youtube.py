"""
YouTube Schemas

Request model for the metadata lookup function.
"""

from typing import Optional

from pydantic import BaseModel


class FetchYouTubeDataRequest(BaseModel):
    """Missing or empty url is answered with a 400, not a 422."""

    url: Optional[str] = None
