from pydantic import BaseModel, Field

class SiteConfigEntry(BaseModel):
    key: str = Field(min_length=1)
    value: str

    class Config:
        from_attributes = True
