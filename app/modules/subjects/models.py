# Supabase table: subjects
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

subjects:
- id: uuid (primary key)
- name: text (not null)
- code: text (unique, not null) - stored upper-case, e.g. MATH
- category: text (not null) - values: core, elective
- level_categories: text[] (default: '{}') - values: KG, Lower Primary, Upper Primary, JHS
- description: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
