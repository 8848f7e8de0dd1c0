from pydantic import BaseModel, Field


class SiteRules(BaseModel):
    name: str
    pages: list[str]

class CmsRules(BaseModel):
    identifier_pattern: str = r"^[a-z0-9][a-z0-9_-]{0,63}$"
    max_payload_bytes: int = Field(default=262144, gt=0)
    enforce_known_pages: bool = False

class Rules(BaseModel):
    site: SiteRules
    cms: CmsRules = Field(default_factory=CmsRules)
