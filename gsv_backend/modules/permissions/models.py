# Supabase tables: intern_permissions, permission_change_log, user_custom_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

intern_permissions:
- id: uuid (primary key)
- intern_id: uuid (foreign key to users.id, unique)
- permissions: jsonb (not null) - {"<permission_key>": true|false}, keys from config/permissions_config.py
- granted_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

permission_change_log:
- id: uuid (primary key)
- intern_id: uuid (foreign key to users.id)
- action: text - values: granted, revoked
- permission_key: text
- old_value: boolean
- new_value: boolean
- changed_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())

user_custom_permissions:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id)
- permission_type: text - values: content_block, form, blog_post, volunteer
- resource_id: text (nullable) - null applies to every resource of the type
- permissions: jsonb - {"can_view": bool, "can_edit": bool, ...}
- expires_at: timestamp (nullable)
- created_at: timestamp (default: now())
"""
