# Supabase tables: chapters, chapter_leadership

"""
Expected Supabase table structure:

chapters:
- id: uuid (primary key)
- name: text
- country: text
- region: text (nullable)
- language: text (default 'en')
- timezone: text (default 'UTC')
- currency: text (default 'USD')
- contact_email: text (nullable)
- website_url: text (nullable)
- social_media: jsonb
- status: text - 'forming', 'active', 'inactive'
- created_at: timestamp

chapter_leadership:
- id: uuid (primary key)
- chapter_id: uuid (foreign key to chapters.id)
- user_id: uuid (foreign key to users.id)
- role: text
- is_active: boolean
"""
