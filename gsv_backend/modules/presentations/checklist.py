# Default onboarding checklist created the first time a team's checklist is opened
DEFAULT_CHECKLIST_ITEMS = [
    ("Submit Group Application", "Complete and submit the volunteer group application form", "application"),
    ("Join Group Chat", "Join your team group chat for coordination", "onboarding"),
    ("Choose Presentation Topic", "Select and confirm your environmental presentation topic", "onboarding"),
    ("Review Resources", "Review presentation templates and guidelines", "onboarding"),
    ("Create Presentation Draft", "Build your Google Slides presentation draft", "preparation"),
    ("Share with GSV", "Share your presentation with greensiliconvalley27@gmail.com", "preparation"),
    ("Submit for Review", "Submit your final presentation for founder review", "presentation"),
    ("Complete Presentation", "Successfully deliver your environmental presentation", "followup"),
    ("Log Volunteer Hours", "Record and submit your volunteer hours", "followup"),
    ("Upload Documents", "Upload required forms signed by teachers and volunteers", "followup"),
]


def default_checklist(team_id):
    return [
        {
            "volunteer_team_id": team_id,
            "item_name": name,
            "item_description": description,
            "item_category": category,
            "is_required": True,
            "is_completed": False,
            "order_index": index,
        }
        for index, (name, description, category) in enumerate(DEFAULT_CHECKLIST_ITEMS, start=1)
    ]


def completion_percentage(items) -> int:
    """Share of required items completed, rounded to a whole percent"""
    required = [item for item in items if item.get("is_required")]
    if not required:
        return 0
    done = sum(1 for item in required if item.get("is_completed"))
    return round(done / len(required) * 100)
