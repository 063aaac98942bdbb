from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import date

RequestType = Literal["gsv_provided", "volunteer_funded", "kit_recommendation"]
MaterialCategory = Literal["science_equipment", "presentation_materials", "activity_supplies"]


class MaterialItem(BaseModel):
    category: MaterialCategory
    name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(ge=1)
    estimated_cost: float = Field(ge=0)


class MaterialRequestCreate(BaseModel):
    presentation_id: str = Field(alias="presentationId", min_length=1)
    request_type: RequestType = Field(alias="requestType")
    items: List[MaterialItem] = Field(min_length=1)
    delivery_preference: Literal["school_address", "volunteer_address"] = Field(alias="deliveryPreference")
    needed_by_date: date = Field(alias="neededByDate")
    budget_justification: Optional[str] = Field(default=None, alias="budgetJustification")

    class Config:
        populate_by_name = True

    def total_cost(self) -> float:
        return round(sum(item.estimated_cost * item.quantity for item in self.items), 2)


class MaterialApproval(BaseModel):
    # Optional so that missing fields are reported with a single message
    request_id: Optional[str] = Field(default=None, alias="requestId")
    action: Optional[str] = None
    notes: Optional[str] = None
    message_to_group: Optional[str] = Field(default=None, alias="messageToGroup")

    class Config:
        populate_by_name = True


class MaterialRequestEnvelope(BaseModel):
    ok: bool = True
    request: Dict[str, Any]
    message: str


class MaterialRequestList(BaseModel):
    ok: bool = True
    requests: List[Dict[str, Any]]
