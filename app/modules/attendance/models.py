# Supabase table: attendance
# Term attendance summary per student, entered by the class teacher
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

attendance:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, not null)
- teacher_id: uuid (foreign key to users.id, nullable) - teacher who entered the summary
- term: integer (not null) - 1..3
- academic_year: text (not null) - YYYY/YYYY
- total_days: integer (not null)
- present_days: integer (not null)
- absent_days: integer (not null)
- late_days: integer (default: 0)
- excused_days: integer (default: 0)
- attendance_percentage: numeric - present_days / total_days * 100, two decimals
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (student_id, term, academic_year)
"""
