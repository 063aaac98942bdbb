# Supabase table: material_requests
# Status flow: submitted -> approved | cancelled

"""
Expected Supabase table structure:

material_requests:
- id: uuid (primary key)
- group_id: bigint (foreign key to volunteers.id)
- presentation_id: uuid (foreign key to presentations.id)
- request_type: text - 'gsv_provided', 'volunteer_funded', 'kit_recommendation'
- estimated_cost: numeric - sum of item estimated_cost * quantity
- budget_justification: text (nullable)
- items: jsonb - [{"category", "name", "quantity", "estimated_cost"}]
- delivery_preference: text - 'school_address', 'volunteer_address'
- needed_by_date: date
- status: text - 'submitted', 'approved', 'cancelled'
- created_by: uuid (foreign key to users.id)
- approved_by: uuid (foreign key to users.id, nullable)
- approved_at: timestamp (nullable)
- purchase_notes: text (nullable)
- cancellation_reason: text (nullable)
- created_at: timestamp
"""
