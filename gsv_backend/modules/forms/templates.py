"""Default columns seeded when a form is created from a template."""

GRADE_LEVELS = ["9th", "10th", "11th", "12th", "College", "Other"]
INTEREST_AREAS = [
    "Environmental Science", "STEM Education", "Community Outreach",
    "Event Planning", "Social Media", "Fundraising",
]
AVAILABILITY = ["Weekdays after school", "Weekends", "Summer break", "School holidays"]
REFERRAL_SOURCES = ["School", "Social media", "Friend/family", "Website", "Event", "Other"]
PARTICIPATE_AGAIN = ["Definitely", "Probably", "Maybe", "Probably not", "Definitely not"]

FORM_TEMPLATES = {
    "basic": [
        {"title": "Full Name", "field_type": "text", "required": True},
        {"title": "Email", "field_type": "email", "required": True},
        {"title": "Message", "field_type": "textarea", "required": False},
    ],
    "volunteer_registration": [
        {"title": "Full Name", "field_type": "text", "required": True},
        {"title": "Email", "field_type": "email", "required": True},
        {"title": "Phone", "field_type": "text", "required": False},
        {"title": "School/Organization", "field_type": "text", "required": False},
        {"title": "Grade Level", "field_type": "select", "required": False, "options": GRADE_LEVELS},
        {"title": "Areas of Interest", "field_type": "multiselect", "required": False, "options": INTEREST_AREAS},
        {"title": "Availability", "field_type": "multiselect", "required": False, "options": AVAILABILITY},
        {"title": "Previous volunteering experience", "field_type": "textarea", "required": False},
        {"title": "How did you hear about us?", "field_type": "select", "required": False, "options": REFERRAL_SOURCES},
    ],
    "event_feedback": [
        {"title": "Event Name", "field_type": "text", "required": True},
        {"title": "Event Date", "field_type": "date", "required": True},
        {"title": "Your Name", "field_type": "text", "required": False},
        {"title": "Overall Rating", "field_type": "rating", "required": True},
        {"title": "What did you like most?", "field_type": "textarea", "required": False},
        {"title": "What could be improved?", "field_type": "textarea", "required": False},
        {"title": "Would you participate again?", "field_type": "select", "required": True, "options": PARTICIPATE_AGAIN},
        {"title": "Additional comments", "field_type": "textarea", "required": False},
    ],
}


def template_columns(template: str):
    """Columns for a template with column_index filled in; unknown names fall back to basic"""
    columns = FORM_TEMPLATES.get(template) or FORM_TEMPLATES["basic"]
    return [{**column, "column_index": index} for index, column in enumerate(columns)]
