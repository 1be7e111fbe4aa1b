# Supabase table: subject_assignments
# Links a subject teacher to a subject taught in a class
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

subject_assignments:
- id: uuid (primary key)
- subject_id: uuid (foreign key to subjects.id, not null)
- teacher_id: uuid (foreign key to users.id, not null)
- class_id: uuid (foreign key to classes.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (subject_id, teacher_id, class_id)
"""
