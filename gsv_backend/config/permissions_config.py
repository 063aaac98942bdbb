"""
Granular Permissions Configuration
This config defines the intern permission keys (stored as a JSON map in
intern_permissions.permissions), the role defaults and the custom
permission mappings used by the permission evaluator.
"""

ROLES = ["founder", "intern", "volunteer", "teacher", "chapter_leader", "partner"]
STAFF_ROLES = ["founder", "intern"]

# Intern permission keys grouped by area of the dashboard
INTERN_PERMISSION_CATEGORIES = {
    "dashboard": {
        "description": "Dashboard and reporting",
        "permissions": {
            "dashboard_access": "Access the staff dashboard",
            "analytics_view": "View analytics",
            "reports_export": "Export reports",
        }
    },
    "applications": {
        "description": "Volunteer applications",
        "permissions": {
            "applications_view": "View volunteer applications",
            "applications_approve": "Approve volunteer applications",
            "applications_reject": "Reject volunteer applications",
            "volunteer_profiles_edit": "Edit volunteer profiles",
        }
    },
    "teams": {
        "description": "Volunteer teams",
        "permissions": {
            "teams_view_all": "View all teams",
            "teams_assign_members": "Assign members to teams",
            "teams_edit_details": "Edit team details",
            "teams_progress_tracking": "Track team progress",
        }
    },
    "content": {
        "description": "Website content",
        "permissions": {
            "website_content_edit": "Edit website content",
            "blog_posts_create": "Create blog posts",
            "announcements_create": "Create announcements",
            "resources_upload": "Upload resources",
        }
    },
    "procurement": {
        "description": "Materials and budget",
        "permissions": {
            "procurement_settings_edit": "Edit procurement settings",
            "material_requests_approve": "Approve material requests",
            "material_requests_view": "View material requests",
            "budget_reports_view": "View budget reports",
        }
    },
    "communications": {
        "description": "Messaging and notifications",
        "permissions": {
            "email_templates_edit": "Edit email templates",
            "bulk_messaging_send": "Send bulk messages",
            "notifications_manage": "Manage notifications",
        }
    },
    "system": {
        "description": "Users and system",
        "permissions": {
            "user_management_create": "Create users",
            "user_management_edit": "Edit users",
            "system_settings_edit": "Edit system settings",
            "audit_logs_view": "View audit logs",
        }
    },
    "international": {
        "description": "International expansion",
        "permissions": {
            "international_settings_edit": "Edit international settings",
            "multi_language_content_edit": "Edit multi-language content",
        }
    },
}

INTERN_PERMISSION_KEYS = [
    key
    for category in INTERN_PERMISSION_CATEGORIES.values()
    for key in category["permissions"]
]

# Custom permission types and the dotted keys they cover
CUSTOM_PERMISSION_MAPPINGS = {
    "content_block": ["content.view", "content.edit", "content.delete", "content.publish"],
    "form": ["forms.view", "forms.edit", "forms.delete", "forms.publish"],
    "blog_post": ["blog.view", "blog.edit", "blog.delete", "blog.publish"],
    "volunteer": ["volunteers.view", "volunteers.edit", "volunteers.approve", "volunteers.assign"],
}

# Dotted action suffix -> flag stored in user_custom_permissions.permissions
CUSTOM_PERMISSION_FLAGS = {
    "view": "can_view",
    "edit": "can_edit",
    "delete": "can_delete",
    "publish": "can_publish",
    "approve": "can_approve",
    "assign": "can_assign",
}

# Role defaults for dotted keys; "*" grants everything
ROLE_DEFAULT_PERMISSIONS = {
    "founder": ["*"],
    "intern": ["content.view", "forms.view", "blog.view", "blog.edit", "volunteers.view"],
    "volunteer": ["content.view", "forms.view", "blog.view"],
    "teacher": ["content.view", "forms.view"],
    "chapter_leader": ["content.view", "forms.view", "volunteers.view", "volunteers.assign"],
    "partner": ["content.view"],
}

# Intern permission keys that imply dotted keys for the evaluator
INTERN_KEY_GRANTS = {
    "applications_approve": ["volunteers.approve"],
    "volunteer_profiles_edit": ["volunteers.edit"],
    "teams_assign_members": ["volunteers.assign"],
    "website_content_edit": ["content.edit", "content.publish"],
    "blog_posts_create": ["blog.publish"],
}


def get_intern_permission_catalog():
    """
    Returns the permission keys grouped by category for the permission editor.
    Format: [
        {"category": "dashboard", "description": "...",
         "permissions": [{"key": "dashboard_access", "description": "..."}, ...]},
        ...
    ]
    """
    catalog = []
    for name, category in INTERN_PERMISSION_CATEGORIES.items():
        catalog.append({
            "category": name,
            "description": category["description"],
            "permissions": [
                {"key": key, "description": description}
                for key, description in category["permissions"].items()
            ]
        })
    return catalog


def empty_intern_permissions():
    return {key: False for key in INTERN_PERMISSION_KEYS}
