from pydantic import BaseModel, StrictBool, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

DEFAULT_PROCUREMENT_INSTRUCTIONS = "Please specify exactly what materials you need for your presentation."

DEFAULT_PROCUREMENT_SETTINGS = {
    "procurement_enabled": True,
    "max_budget_per_group": 25.0,
    "volunteer_self_fund_allowed": True,
    "kit_recommendations_enabled": True,
    "kit_inventory_link": None,
    "procurement_instructions": DEFAULT_PROCUREMENT_INSTRUCTIONS,
    "require_budget_justification": False,
    "notify_on_request": True,
    "notify_on_approval": True,
}


class ProcurementSettingsUpdate(BaseModel):
    procurement_enabled: StrictBool
    max_budget_per_group: float
    volunteer_self_fund_allowed: StrictBool
    kit_recommendations_enabled: StrictBool
    kit_inventory_link: Optional[str] = None
    procurement_instructions: Optional[str] = None
    require_budget_justification: StrictBool
    notify_on_request: StrictBool
    notify_on_approval: StrictBool

    @field_validator("max_budget_per_group")
    @classmethod
    def budget_in_range(cls, value: float) -> float:
        if value <= 0 or value > 100:
            raise ValueError("Budget per group must be between $1 and $100")
        return value


class ProcurementSettingsResponse(BaseModel):
    id: Optional[str] = None
    procurement_enabled: bool
    max_budget_per_group: float
    volunteer_self_fund_allowed: bool
    kit_recommendations_enabled: bool
    kit_inventory_link: Optional[str] = None
    procurement_instructions: Optional[str] = None
    require_budget_justification: bool
    notify_on_request: bool
    notify_on_approval: bool
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ComplianceRequirements(BaseModel):
    gdpr_enabled: StrictBool = False
    ccpa_enabled: StrictBool = False
    pipeda_enabled: StrictBool = False


class InternationalSettingsUpdate(BaseModel):
    international_enabled: StrictBool
    coming_soon_message: str
    supported_countries: List[str] = []
    language_options: List[str] = ["en"]
    timezone_support: bool = False
    compliance_requirements: ComplianceRequirements = ComplianceRequirements()
    localized_content: Dict[str, Any] = {}

    @field_validator("coming_soon_message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Coming soon message is required")
        return value.strip()


class InternationalSettingsResponse(BaseModel):
    id: Optional[str] = None
    international_enabled: bool
    coming_soon_message: str
    supported_countries: List[str] = []
    language_options: List[str] = ["en"]
    timezone_support: bool = False
    compliance_requirements: Dict[str, bool] = {}
    localized_content: Dict[str, Any] = {}
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingsEnvelope(BaseModel):
    ok: bool = True
    settings: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
