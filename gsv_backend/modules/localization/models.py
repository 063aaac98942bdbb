# Supabase tables: supported_languages, localization_content, regional_settings

"""
Expected Supabase table structure:

supported_languages:
- code: text (primary key) - ISO 639-1 code, e.g. 'en', 'es'
- name: text
- native_name: text
- is_active: boolean
- is_default: boolean - exactly one row is the default
- created_at: timestamp

localization_content:
- id: uuid (primary key)
- content_key: text - e.g. 'nav.home'
- language: text (foreign key to supported_languages.code)
- value: text
- context: text (nullable)
- is_active: boolean
- updated_at: timestamp
- unique (content_key, language)

regional_settings:
- id: uuid (primary key)
- region: text
- calendar_format: text - 'gregorian', ...
- date_format: text - e.g. 'MM/DD/YYYY'
- time_format: text - '12h', '24h'
- currency: text - ISO 4217 code
- timezone: text - IANA name, e.g. 'America/Los_Angeles'
- created_at: timestamp
"""
