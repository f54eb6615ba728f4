from pydantic import BaseModel, ConfigDict, Field


class AgvProcFields(BaseModel):
    dni: str


class AgvProcUrls(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file: str = Field(alias="FILE")


class AgvProcResponse(BaseModel):
    bot: str
    chat_id: int
    date: str
    fields: AgvProcFields
    from_id: int
    message: str
    parts_received: int = 1
    urls: AgvProcUrls


class StatusResponse(BaseModel):
    status: str = "ok"
    timestamp: str
