# Supabase tables: volunteers (volunteer teams), team_members, volunteer_status_history
# Application flow: pending -> approved | rejected

"""
Expected Supabase table structure:

volunteers:
- id: bigint (primary key)
- team_name: text
- email: text - primary contact email
- group_city: text
- group_size: integer - 3 to 7
- group_members: jsonb - [{"name", "email", "phone", "highschool"}]
- primary_contact_phone: text (nullable)
- why_volunteer: text (nullable)
- application_status: text - 'pending', 'contacted', 'approved', 'rejected'
- status: text - 'inactive', 'active'
- presentation_status: text (nullable)
- onboarding_step: text (nullable)
- hours_total: numeric (default 0)
- chapter_id: uuid (foreign key to chapters.id, nullable)
- rejection_reason: text (nullable)
- approved_at: timestamp (nullable)
- created_at: timestamp

team_members:
- id: uuid (primary key)
- volunteer_team_id: bigint (foreign key to volunteers.id)
- user_id: uuid (foreign key to users.id)
- member_name: text
- member_email: text
- member_phone: text (nullable)
- member_highschool: text (nullable)
- is_primary_contact: boolean
- unique (volunteer_team_id, user_id)

volunteer_status_history:
- id: uuid (primary key)
- volunteer_id: bigint (foreign key to volunteers.id)
- old_status: text
- new_status: text
- changed_by: uuid (foreign key to users.id)
- notes: text (nullable)
- created_at: timestamp
"""
