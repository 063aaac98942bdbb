# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, nullable) - null means a broadcast to founders
- notification_type: text (not null) - e.g. material_request, material_request_approved, hours_approved, reminder
- title: text (not null)
- message: text (not null)
- action_url: text (nullable)
- priority: text (default: 'medium') - values: low, medium, high, urgent
- related_id: text (nullable)
- related_type: text (nullable)
- is_read: boolean (default: false)
- read_at: timestamp (nullable)
- created_at: timestamp (default: now())
"""
