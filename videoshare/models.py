from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class VideoRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    size: int
    size_formatted: str
    upload_date: datetime
    path: str


class UploadResponse(BaseModel):
    message: str
    filename: str
    size: int


class MessageResponse(BaseModel):
    message: str
