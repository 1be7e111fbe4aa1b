# Supabase table: bece_results
# Basic Education Certificate Examination results of graduating Basic 9 students
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

bece_results:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, not null)
- academic_year: text (not null) - YYYY/YYYY
- subject: text (not null) - free-text subject name as printed on the result slip
- grade: text (not null) - values: A1, B2, B3, C4, C5, C6, D7, E8, F9
- remark: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
