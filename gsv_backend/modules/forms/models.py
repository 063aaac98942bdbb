# Supabase tables: forms, form_columns, form_responses
# Form status: draft | published | closed

"""
Expected Supabase table structure:

forms:
- id: uuid (primary key)
- title: text
- description: text
- status: text - 'draft', 'published', 'closed'
- settings: jsonb
- created_by: uuid (foreign key to users.id)
- created_at: timestamp
- updated_at: timestamp

form_columns:
- id: uuid (primary key)
- form_id: uuid (foreign key to forms.id)
- field_key: text - key used in submitted responses, e.g. 'full_name'
- title: text - label shown to respondents
- field_type: text - 'text', 'textarea', 'email', 'number', 'date', 'select', 'radio',
  'multiselect', 'checkbox', 'file', 'rating'
- required: boolean
- column_index: integer
- validation_rules: jsonb - {"minLength", "maxLength", "pattern", "customMessage"}
- formatting: jsonb - {"options": [...]}
- conditional_logic: jsonb (nullable) - {"dependsOn", "condition", "value"}

form_responses:
- id: uuid (primary key)
- form_id: uuid (foreign key to forms.id)
- responses: jsonb - {field_key: value}
- submitted_by: uuid (nullable)
- submitted_at: timestamp
"""
