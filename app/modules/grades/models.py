# Supabase table: grades
# One row per student, subject, term and academic year
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

grades:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, not null)
- subject_id: uuid (foreign key to subjects.id, not null)
- class_id: uuid (foreign key to classes.id, not null)
- teacher_id: uuid (foreign key to users.id, not null) - teacher who entered the marks
- term: integer (not null) - 1..3
- academic_year: text (not null) - YYYY/YYYY
- project: numeric (default: 0) - out of 40
- test1: numeric (default: 0) - out of 20
- test2: numeric (default: 0) - out of 20
- group_work: numeric (default: 0) - out of 20
- exam: numeric (default: 0) - out of 100
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (student_id, subject_id, term, academic_year)

Class score = (project + test1 + test2 + group_work) / 100 * 50
Exam score  = exam / 100 * 50
Total       = class score + exam score, graded against the active grading system
"""
