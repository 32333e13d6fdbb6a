from __future__ import annotations

from solution_quest.modules.narrative.route_engine import Route

CHARACTER_OPTIONS: dict[str, list[dict]] = {
    "title": [
        {"id": "high_school", "label": "High School - Apprentice", "modifiers": ()},
        {"id": "diploma", "label": "Vocational (VET) - Craftsman", "modifiers": ()},
        {"id": "bachelor", "label": "Bachelor's - Scholar", "modifiers": ("K+2",)},
        {"id": "master", "label": "Master's - Sage", "modifiers": ("K+3",)},
        {"id": "phd", "label": "PhD - Sage", "modifiers": ("K+4",)},
    ],
    "species": [
        {"id": "business", "label": "Griffin (Business / Law)", "modifiers": ("C+1",)},
        {"id": "engineering", "label": "Dwarf (Engineering / Mechanics)", "modifiers": ()},
        {"id": "it", "label": "Mech (IT / Computer Science)", "modifiers": ()},
        {"id": "arts", "label": "Elf (Creative Arts / Design)", "modifiers": ("L+1",)},
        {"id": "music", "label": "Siren (Music / Performance)", "modifiers": ()},
        {"id": "health", "label": "Druid (Healthcare / Nursing)", "modifiers": ()},
        {"id": "education", "label": "Owlkin (Education / Social Science)", "modifiers": ()},
        {"id": "science", "label": "Golem (Science / Research)", "modifiers": ("K+1",)},
        {"id": "other", "label": "Mystic (Other)", "modifiers": ()},
    ],
    "guild": [
        {"id": "admin_sales", "label": "Admin/Sales Guild", "modifiers": ()},
        {"id": "healthcare", "label": "Healthcare Guild", "modifiers": ()},
        {"id": "engineering", "label": "Engineering Guild", "modifiers": ()},
        {"id": "retail", "label": "Retail Guild", "modifiers": ()},
        {"id": "hospitality", "label": "Hospitality Guild", "modifiers": ()},
        {"id": "teaching", "label": "Teaching Guild", "modifiers": ()},
        {"id": "government", "label": "Government Guild", "modifiers": ()},
        {"id": "other", "label": "Other Guild", "modifiers": ()},
    ],
    "english_level": [
        {"id": "none", "label": "None yet - Empty Scroll", "modifiers": ()},
        {"id": "basic", "label": "Basic (IELTS5 / PTE35) - Faded Scroll", "modifiers": ("C+1",)},
        {"id": "strong", "label": "Strong (IELTS6 / PTE50) - Refined Scroll", "modifiers": ("K+1",)},
        {"id": "excellent", "label": "Excellent (IELTS7 / PTE65+) - Arcane Scroll", "modifiers": ("K+1",)},
    ],
    "status": [
        {"id": "outside", "label": "Outside Australia (Offshore Route)", "route": Route.OFFSHORE},
        {"id": "student", "label": "Student in Australia (Student Route)", "route": Route.STUDENT},
        {"id": "whv", "label": "Working Holiday in Australia (WHV Route)", "route": Route.WORKING_HOLIDAY},
        {"id": "graduate", "label": "Graduate visa in Australia (Graduate Route)", "route": Route.GRADUATE},
    ],
    "course_type": [
        {"id": "elicos", "label": "ELICOS - English Language Course"},
        {"id": "vet", "label": "VET - Vocational Education & Training"},
        {"id": "he", "label": "Higher Education - University Degree"},
    ],
}

BONUS_OPTION_TYPES = ("title", "species", "guild", "english_level")
