# Supabase tables: presentations, group_checklist_items

"""
Expected Supabase table structure:

presentations:
- id: uuid (primary key)
- volunteer_team_id: bigint (foreign key to volunteers.id, nullable)
- chapter_id: uuid (foreign key to chapters.id, nullable)
- school_name: text
- teacher_name: text (nullable)
- teacher_email: text (nullable)
- topic: text (nullable)
- grade_level: text (nullable)
- student_count: integer (nullable)
- scheduled_date: timestamp (nullable)
- status: text - 'pending', 'scheduled', 'completed', 'cancelled'
- hours: numeric (nullable) - set when volunteer hours are approved
- feedback: text (nullable)
- notes: text (nullable)
- created_by: uuid (foreign key to users.id)
- created_at: timestamp
- updated_at: timestamp

group_checklist_items:
- id: uuid (primary key)
- volunteer_team_id: bigint (foreign key to volunteers.id)
- item_name: text
- item_description: text (nullable)
- item_category: text - 'application', 'onboarding', 'preparation', 'presentation', 'followup', 'general'
- is_required: boolean
- is_completed: boolean
- completed_at: timestamp (nullable)
- completed_by: uuid (nullable)
- priority: text
- due_date: timestamp (nullable)
- order_index: integer
- updated_at: timestamp
"""
