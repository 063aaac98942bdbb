# Supabase table: volunteer_documents
# Files live in the 'documents' storage bucket (or S3 when configured)
# Status flow: pending -> approved | rejected | signed_by_founder

"""
Expected Supabase table structure:

volunteer_documents:
- id: bigint (primary key)
- volunteer_id: bigint (foreign key to volunteers.id)
- presentation_id: uuid (foreign key to presentations.id, nullable)
- document_type: text - e.g. 'signed_hours_form', 'permission_slip', 'other'
- file_name: text
- file_url: text
- file_size: integer - bytes
- file_type: text - content type
- storage_key: text - object key in the bucket
- status: text - 'pending', 'approved', 'rejected', 'signed_by_founder'
- uploaded_by: uuid (foreign key to users.id)
- uploaded_at: timestamp
- reviewed_by: uuid (nullable)
- reviewed_at: timestamp (nullable)
- rejection_reason: text (nullable)
- notes: text (nullable)
- signed_by: uuid (nullable)
- signed_at: timestamp (nullable)
- signed_document_url: text (nullable)
"""
