# Supabase table: users (teacher rows)
# Teachers are public.users rows with role class_teacher or subject_teacher.
# Actual operations are handled via Supabase SDK in service.py

"""
Teacher fields on users (see modules/auth/models.py for the full table):
- role: text - primary role used for navigation; class_teacher when is_class_teacher, else subject_teacher
- is_class_teacher: boolean
- is_subject_teacher: boolean
- password_change_required: boolean - true for accounts created by an admin until the first password change

Performance is derived from:
- classes.class_teacher_id
- students (status active, class_teacher_id)
- class_teacher_evaluations.teacher_id
- attendance.teacher_id
- subject_assignments.teacher_id
- grades.teacher_id
"""
