# Supabase tables: class_teacher_evaluations, class_teacher_rewards
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

class_teacher_evaluations:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, not null)
- teacher_id: uuid (foreign key to users.id, not null) - class teacher
- term: integer (not null) - 1..3
- academic_year: text (not null)
- conduct_rating: text (nullable) - values: schemas.ConductRating
- conduct_remarks: text (nullable)
- interest_level: text (nullable) - values: schemas.InterestLevel
- interest_remarks: text (nullable)
- class_teacher_remarks: text (nullable) - values: schemas.ClassTeacherRemark
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (student_id, term, academic_year)

class_teacher_rewards:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, not null)
- teacher_id: uuid (foreign key to users.id, not null)
- reward_type: text (not null) - values: merit, achievement, participation, leadership, improvement, other
- description: text (not null)
- date_awarded: date (default: current_date)
- created_at: timestamp (default: now())
"""
