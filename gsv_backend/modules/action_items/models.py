# Supabase tables: action_items, action_item_comments, action_item_history
# Status: pending | in_progress | completed | cancelled

"""
Expected Supabase table structure:

action_items:
- id: uuid (primary key)
- title: text
- description: text (nullable)
- type: text - 'task', 'review', 'followup', 'reminder', 'deadline', 'approval'
- priority: text - 'low', 'medium', 'high', 'urgent'
- status: text - 'pending', 'in_progress', 'completed', 'cancelled'
- assigned_to: uuid[] - users.id values
- assigned_by: uuid (foreign key to users.id)
- due_date: timestamp (nullable)
- completed_at: timestamp (nullable)
- completed_by: uuid (nullable)
- related_entity_type: text (nullable)
- related_entity_id: text (nullable)
- metadata: jsonb
- action_required: jsonb
- tags: text[]
- is_system_generated: boolean
- created_at: timestamp
- updated_at: timestamp

action_item_comments:
- id: uuid (primary key)
- action_item_id: uuid (foreign key to action_items.id)
- user_id: uuid (foreign key to users.id)
- comment: text
- is_internal: boolean
- created_at: timestamp

action_item_history:
- id: uuid (primary key)
- action_item_id: uuid
- user_id: uuid
- action: text - 'created', 'updated', 'status_changed', 'commented'
- old_value: jsonb (nullable)
- new_value: jsonb (nullable)
- metadata: jsonb
- created_at: timestamp
"""
