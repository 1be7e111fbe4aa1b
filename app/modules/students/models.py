# Supabase table: students
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

students:
- id: uuid (primary key)
- student_id: text (unique, not null) - school code, e.g. STU001
- first_name: text (not null)
- last_name: text (not null)
- middle_name: text (nullable)
- date_of_birth: date (not null)
- gender: text (not null) - values: male, female
- class_id: uuid (foreign key to classes.id)
- class_teacher_id: uuid (foreign key to users.id, nullable) - defaults to the class's teacher
- parent_name: text (nullable)
- parent_phone: text (nullable)
- address: text (nullable)
- enrollment_date: date (not null)
- status: text (default: 'active') - values: active, transferred, graduated
- photo_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

classes.student_count is kept equal to the number of active students in the class.
"""
