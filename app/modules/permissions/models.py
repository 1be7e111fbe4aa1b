# Supabase tables: permissions, user_permissions
# permissions is seeded from app/config/permissions_config.py (app/scripts/seed_permissions.py)
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key)
- code: text (unique, not null) - module:action, e.g. grades:enter
- name: text (not null)
- description: text (nullable)
- category: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_permissions:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (user_id, permission_id)

Admins hold every permission. Teachers hold their role defaults
(ROLE_DEFAULTS in permissions_config.py) plus their user_permissions grants.
"""
