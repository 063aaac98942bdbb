# Supabase tables: scheduled_reminders, team_meetings, generated_tasks
# Reminder status flow: scheduled -> sent | cancelled

"""
Expected Supabase table structure:

scheduled_reminders:
- id: text (primary key) - deterministic, e.g. reminder-{presentation}-{member}-1week
- title: text
- message: text
- recipient_id: text - users.id, or the teacher's email when recipient_type = 'teacher'
- recipient_type: text - 'volunteer', 'teacher', 'user'
- reminder_type: text - 'presentation', 'meeting', 'deadline'
- scheduled_for: timestamp
- status: text - 'scheduled', 'sent', 'cancelled'
- related_entity_id: text
- related_entity_type: text - 'presentation', 'meeting', 'task'
- priority: text - 'low', 'medium', 'high', 'urgent'
- metadata: jsonb
- sent_at: timestamp (nullable)
- created_at: timestamp

team_meetings:
- id: uuid (primary key)
- volunteer_team_id: bigint (foreign key to volunteers.id)
- title: text
- meeting_date: timestamp
- location: text (nullable)

generated_tasks:
- id: uuid (primary key)
- title: text
- description: text (nullable)
- assigned_to: uuid (foreign key to users.id, nullable)
- due_date: timestamp (nullable)
- priority: text - 'low', 'medium', 'high', 'urgent'
"""
