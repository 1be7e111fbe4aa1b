# Supabase tables: school_settings, academic_settings, assessment_structure,
# system_preferences, user_preferences, term_settings, grading_system, grade_levels
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

school_settings (single row):
- id: uuid (primary key)
- name: text (not null)
- address, phone, email, website: text (nullable)
- updated_at: timestamp

academic_settings (single row):
- id: uuid (primary key)
- current_academic_year: text (not null) - YYYY/YYYY
- current_term: integer (not null) - 1..3
- updated_at: timestamp

assessment_structure (single row):
- id: uuid (primary key)
- project, test1, test2, group_work, exam: numeric - maximum marks per component
- updated_at: timestamp

system_preferences (single row):
- id: uuid (primary key)
- auto_backup: boolean
- backup_frequency: text - values: daily, weekly, monthly
- data_retention_years: integer
- updated_at: timestamp

user_preferences:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, unique)
- email_notifications, grade_alerts, attendance_alerts, report_alerts, system_updates: boolean
- theme: text - values: light, dark, auto
- updated_at: timestamp

term_settings:
- id: uuid (primary key)
- academic_year: text (not null)
- term: integer (not null)
- closing_date: date (nullable)
- reopening_date: date (nullable)
- unique constraint on (academic_year, term)

grading_system:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- is_active: boolean - the active system grades every score

grade_levels:
- id: uuid (primary key)
- grading_system_id: uuid (foreign key to grading_system.id, not null)
- code: text (not null) - e.g. HP
- name: text (not null)
- min_percentage: numeric (not null)
- max_percentage: numeric (not null)
- order_index: integer - display order, highest band first
"""
