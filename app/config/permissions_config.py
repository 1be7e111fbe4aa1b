"""
Permissions Configuration
This config defines the permission catalog for all modules and the default
grants each teacher role carries before any per-user permissions are added.
Used by the seed script and by the permission check dependency.
"""

# Define modules and their actions
MODULES = {
    "students": {
        "category": "Students",
        "actions": ["create", "read", "update", "delete", "import"],
        "description": "Student records"
    },
    "classes": {
        "category": "Classes",
        "actions": ["create", "read", "update", "delete", "promote", "graduate"],
        "description": "Class rosters, promotion and graduation"
    },
    "subjects": {
        "category": "Academics",
        "actions": ["create", "read", "update", "delete", "assign"],
        "description": "Subjects and teacher subject assignments"
    },
    "grades": {
        "category": "Academics",
        "actions": ["read", "enter", "delete"],
        "description": "Continuous assessment and exam grades"
    },
    "attendance": {
        "category": "Class Teacher",
        "actions": ["read", "enter", "delete"],
        "description": "Term attendance summaries"
    },
    "evaluations": {
        "category": "Class Teacher",
        "actions": ["read", "enter", "reward"],
        "description": "Conduct, interest and remarks"
    },
    "bece": {
        "category": "Examinations",
        "actions": ["read", "enter", "delete"],
        "description": "BECE results for graduated students"
    },
    "teachers": {
        "category": "Staff",
        "actions": ["create", "read", "update", "delete"],
        "description": "Teacher accounts"
    },
    "reports": {
        "category": "Reports",
        "actions": ["view", "analytics"],
        "description": "Report cards and analytics"
    },
    "settings": {
        "category": "Administration",
        "actions": ["read", "update"],
        "description": "School settings and grading system"
    },
    "permissions": {
        "category": "Administration",
        "actions": ["read", "manage"],
        "description": "Teacher permission management"
    }
}

# Additional descriptions for non-CRUD actions
MODULE_SPECIFIC_PERMISSIONS = {
    "students": {
        "import": "Bulk import students"
    },
    "classes": {
        "promote": "Promote students to the next class level",
        "graduate": "Graduate Basic 9 students with BECE results"
    },
    "subjects": {
        "assign": "Assign subjects to teachers and classes"
    },
    "grades": {
        "enter": "Enter and update student grades"
    },
    "attendance": {
        "enter": "Enter term attendance summaries"
    },
    "evaluations": {
        "enter": "Enter class teacher evaluations",
        "reward": "Award and remove student rewards"
    },
    "bece": {
        "enter": "Enter and update BECE results"
    },
    "reports": {
        "view": "View and print report cards",
        "analytics": "View performance analytics"
    },
    "permissions": {
        "manage": "Grant and revoke teacher permissions"
    }
}

# Grants every teacher of a role holds without explicit user_permissions rows
ROLE_DEFAULTS = {
    "class_teacher": [
        "students:read", "students:create", "students:update",
        "classes:read", "subjects:read",
        "grades:read", "grades:enter",
        "attendance:read", "attendance:enter",
        "evaluations:read", "evaluations:enter", "evaluations:reward",
        "reports:view", "reports:analytics",
        "settings:read",
    ],
    "subject_teacher": [
        "students:read", "classes:read", "subjects:read",
        "grades:read", "grades:enter",
        "reports:view", "reports:analytics",
        "settings:read",
    ],
}


def get_permission_catalog():
    """
    Returns the list of all permissions.
    Format: [
        {"code": "students:create", "name": "Create students", "category": "Students", "description": "..."},
        ...
    ]
    """
    permissions = []

    for module_name, module_config in MODULES.items():
        for action in module_config["actions"]:
            code = f"{module_name}:{action}"
            name = f"{action.capitalize()} {module_name.replace('_', ' ')}"
            description = f"{action.capitalize()} {module_config['description'].lower()}"

            # Add module-specific description if available
            if module_name in MODULE_SPECIFIC_PERMISSIONS and action in MODULE_SPECIFIC_PERMISSIONS[module_name]:
                description = MODULE_SPECIFIC_PERMISSIONS[module_name][action]
                name = description

            permissions.append({
                "code": code,
                "name": name,
                "category": module_config["category"],
                "description": description
            })

    return permissions


def all_permission_codes():
    return [p["code"] for p in PERMISSION_CATALOG]


# Export the catalog for use in seed scripts
PERMISSION_CATALOG = get_permission_catalog()
