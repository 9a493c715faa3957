SEVERITY_OPTIONS = [
    {"value": "SEV1", "label": "SEV1", "color": "bg-red-100 text-red-800"},
    {"value": "SEV2", "label": "SEV2", "color": "bg-orange-100 text-orange-800"},
    {"value": "SEV3", "label": "SEV3", "color": "bg-yellow-100 text-yellow-800"},
    {"value": "SEV4", "label": "SEV4", "color": "bg-blue-100 text-blue-800"},
]

STATUS_OPTIONS = [
    {"value": "OPEN", "label": "Open", "color": "bg-red-100 text-red-800"},
    {"value": "MITIGATED", "label": "Mitigated", "color": "bg-yellow-100 text-yellow-800"},
    {"value": "RESOLVED", "label": "Resolved", "color": "bg-green-100 text-green-800"},
]

DEFAULT_BADGE = "bg-gray-100 text-gray-800"

NOTICES = {
    "created": ("success", "Incident created successfully!"),
    "updated": ("success", "Incident updated successfully!"),
    "deleted": ("success", "Incident deleted successfully!"),
    "delete-failed": ("error", "Error deleting incident."),
}


def severity_color(value: str | None) -> str:
    return next((opt["color"] for opt in SEVERITY_OPTIONS if opt["value"] == value), DEFAULT_BADGE)


def status_color(value: str | None) -> str:
    return next((opt["color"] for opt in STATUS_OPTIONS if opt["value"] == value), DEFAULT_BADGE)


def status_label(value: str | None) -> str:
    return next((opt["label"] for opt in STATUS_OPTIONS if opt["value"] == value), value or "")
