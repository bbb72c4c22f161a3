from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from . import config


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubActivity(CamelModel):
    id: str
    title: str
    start_time: int
    end_time: Optional[int] = None


class WorkSession(CamelModel):
    id: str
    start_time: int
    end_time: Optional[int] = None
    date: str
    sub_activities: List[SubActivity] = Field(default_factory=list)
    note: Optional[str] = None

    @model_serializer(mode="wrap")
    def _serialize(self, handler) -> Dict[str, Any]:
        data = handler(self)
        # note is optional in stored documents; keep absent notes absent
        if self.note is None:
            data.pop("note", None)
        return data


class AppSettings(CamelModel):
    weekly_hours_target: int = Field(default_factory=lambda: config.settings.default_weekly_hours_target, ge=0)
    user_name: str = Field(default_factory=lambda: config.settings.default_user_name)


class AppData(CamelModel):
    sessions: List[WorkSession] = Field(default_factory=list)
    settings: AppSettings = Field(default_factory=AppSettings)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StartSessionRequest(CamelModel):
    title: str
    start_time: int
