from pydantic import BaseModel, Field


class SyncTriggerResponse(BaseModel):
    message: str = Field(default="Sync completed")
    synced: int = Field(description="Records upserted during the run")
    errors: int = Field(description="Records or pages that failed")
