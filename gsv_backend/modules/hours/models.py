# Supabase tables: volunteer_hours, hours_verification_log
# Status flow: pending -> approved | rejected, and -> verified by teacher verification

"""
Expected Supabase table structure:

volunteer_hours:
- id: bigint (primary key)
- volunteer_id: bigint (foreign key to volunteers.id) - the team credited
- submitted_by: uuid (foreign key to users.id)
- presentation_id: uuid (foreign key to presentations.id, nullable)
- date: date
- hours_logged: numeric - 0 < hours <= 24
- activity: text
- feedback: text (nullable)
- status: text - 'pending', 'approved', 'rejected', 'verified'
- adjusted_hours: numeric (nullable)
- approval_notes: text (nullable)
- rejection_reason: text (nullable)
- approved_by: uuid (nullable)
- approved_at: timestamp (nullable)
- verification_method: text (nullable) - 'signature', 'digital', 'email', 'in_person'
- teacher_signature_url: text (nullable)
- verified_by: uuid (nullable)
- verified_at: timestamp (nullable)
- submitted_at: timestamp

hours_verification_log:
- id: uuid (primary key)
- hours_id: bigint (foreign key to volunteer_hours.id)
- verified_by: uuid (foreign key to users.id)
- verification_method: text
- verification_data: jsonb - {"teacher_name", "notes"}
- notes: text (nullable)
- created_at: timestamp
"""
