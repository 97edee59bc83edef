from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    url: str
    path: str
    file_name: str = Field(serialization_alias="fileName")

    model_config = ConfigDict(populate_by_name=True)


class DeleteFileRequest(BaseModel):
    path: str = Field(min_length=1)
