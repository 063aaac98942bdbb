# Supabase tables: procurement_settings, international_settings
# Both tables hold a single row that is updated in place.

"""
Expected Supabase table structure:

procurement_settings:
- id: uuid (primary key)
- procurement_enabled: boolean
- max_budget_per_group: numeric - dollars, 0 < x <= 100
- volunteer_self_fund_allowed: boolean
- kit_recommendations_enabled: boolean
- kit_inventory_link: text (nullable)
- procurement_instructions: text
- require_budget_justification: boolean
- notify_on_request: boolean
- notify_on_approval: boolean
- updated_by: uuid (foreign key to users.id)
- updated_at: timestamp

international_settings:
- id: uuid (primary key)
- international_enabled: boolean
- coming_soon_message: text
- supported_countries: text[]
- language_options: text[] (default: {en})
- timezone_support: boolean
- compliance_requirements: jsonb - {"gdpr_enabled": bool, "ccpa_enabled": bool, "pipeda_enabled": bool}
- localized_content: jsonb
- updated_by: uuid (foreign key to users.id)
- updated_at: timestamp
"""
