# Supabase tables: users, auth.users
# This file documents the expected database schema
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- email: text (unique)
- name: text (nullable)
- role: text (not null, default: 'volunteer') - values: founder, intern, volunteer, teacher, chapter_leader, partner
- status: text (default: 'pending') - values: active, inactive, pending, suspended
- user_category: text (nullable) - newsletter, volunteer, intern, founder, teacher, partner, guest
- phone: text (nullable)
- city: text (nullable)
- state: text (nullable)
- school_affiliation: text (nullable)
- notes: text (nullable)
- last_login_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Note: Authentication data (password, tokens) is stored in auth.users table
managed by Supabase Auth. The role lives here, not in app_metadata.
"""
