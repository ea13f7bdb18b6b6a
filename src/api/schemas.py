from pydantic import BaseModel, ConfigDict, Field

class ResolveResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sha: str
    fq_ref: str = Field(alias="fqRef")

class HealthResponse(BaseModel):
    status: str
    api: str
