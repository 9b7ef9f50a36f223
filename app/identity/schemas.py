# app/identity/schemas.py
from pydantic import BaseModel


class Identity(BaseModel):
    id: str
    email: str

    model_config = {"from_attributes": True, "frozen": True}
