# Supabase table: classes
# Classes are permanent; students move between them by promotion each academic year
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

classes:
- id: uuid (primary key)
- name: text (not null) - e.g. Basic 4A
- level: integer (not null) - 0..10 (KG 1 = 0, KG 2 = 1, Basic 1 = 2 ... Basic 9 = 10)
- stream: text (nullable) - e.g. A
- class_teacher_id: uuid (foreign key to users.id, nullable)
- capacity: integer (not null)
- student_count: integer (default: 0) - active students, maintained by the students service
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Promotion moves active students to a class at the next level. Basic 9 classes are not
promoted; they are graduated with their BECE results, and no class can be promoted
into Basic 9 while it still has active students.
"""
