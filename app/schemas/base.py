from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
