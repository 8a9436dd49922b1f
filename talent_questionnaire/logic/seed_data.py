"""Starter questionnaire: the Acting and Music categories."""

from __future__ import annotations

from typing import Any, Dict, List

_COMFORT = [
    {"value": "very_comfortable", "label": "Very Comfortable"},
    {"value": "comfortable", "label": "Comfortable"},
    {"value": "somewhat_comfortable", "label": "Somewhat Comfortable"},
    {"value": "not_comfortable", "label": "Not Comfortable"},
]

ACTING: Dict[str, Any] = {
    "category": {
        "name": "Acting",
        "slug": "acting",
        "description": "Comprehensive acting questionnaire for talent profiles",
        "target_roles": ["talent"],
        "sort_order": 1,
    },
    "questions": [
        {
            "question": "What are your primary acting specialties?",
            "slug": "primary_specialty",
            "question_type": "multiselect",
            "options": [
                {"value": "film", "label": "Film"},
                {"value": "television", "label": "Television"},
                {"value": "theater", "label": "Theater"},
                {"value": "commercial", "label": "Commercial"},
                {"value": "voice_over", "label": "Voice Over"},
                {"value": "musical_theater", "label": "Musical Theater"},
                {"value": "improv", "label": "Improvisation"},
                {"value": "stand_up", "label": "Stand-up Comedy"},
            ],
            "is_required": True,
            "sort_order": 1,
            "help_text": "Select all acting areas where you have experience",
        },
        {
            "question": "How many years of acting experience do you have?",
            "slug": "years_experience",
            "question_type": "select",
            "options": [
                {"value": "0-1", "label": "0-1 years"},
                {"value": "2-5", "label": "2-5 years"},
                {"value": "6-10", "label": "6-10 years"},
                {"value": "11-15", "label": "11-15 years"},
                {"value": "16-20", "label": "16-20 years"},
                {"value": "20+", "label": "20+ years"},
            ],
            "is_required": True,
            "sort_order": 2,
        },
        {
            "question": "What acting methods or techniques have you studied?",
            "slug": "acting_method",
            "question_type": "multiselect",
            "options": [
                {"value": "meisner", "label": "Meisner Technique"},
                {"value": "method", "label": "Method Acting"},
                {"value": "stanislavski", "label": "Stanislavski System"},
                {"value": "adler", "label": "Stella Adler Technique"},
                {"value": "uta_hagen", "label": "Uta Hagen Technique"},
                {"value": "alexander", "label": "Alexander Technique"},
                {"value": "other", "label": "Other"},
            ],
            "sort_order": 3,
        },
        {
            "question": "How comfortable are you with improvisation?",
            "slug": "improvisation_comfort",
            "question_type": "select",
            "options": _COMFORT,
            "is_required": True,
            "sort_order": 4,
        },
        {
            "question": "What is your experience level with intimate scenes?",
            "slug": "intimate_scenes_comfort",
            "question_type": "select",
            "options": _COMFORT,
            "sort_order": 5,
            "help_text": "This helps directors understand your comfort level with romantic scenes",
        },
        {
            "question": "What is your experience with motion capture/performance capture?",
            "slug": "motion_capture",
            "question_type": "select",
            "options": [
                {"value": "extensive", "label": "Extensive Experience"},
                {"value": "some", "label": "Some Experience"},
                {"value": "limited", "label": "Limited Experience"},
                {"value": "none", "label": "No Experience"},
            ],
            "sort_order": 6,
        },
        {
            "question": "How easily can you cry on cue?",
            "slug": "crying_on_cue",
            "question_type": "select",
            "options": [
                {"value": "easily", "label": "Very Easily"},
                {"value": "with_preparation", "label": "With Some Preparation"},
                {"value": "difficult", "label": "Difficult for Me"},
                {"value": "cannot", "label": "Cannot Do It"},
            ],
            "sort_order": 7,
        },
        {
            "question": "What is your comfort level with stunt work?",
            "slug": "stunt_comfort",
            "question_type": "select",
            "options": [
                {"value": "very_comfortable", "label": "Very Comfortable"},
                {"value": "comfortable", "label": "Comfortable"},
                {"value": "basic_only", "label": "Basic Stunts Only"},
                {"value": "not_comfortable", "label": "Not Comfortable"},
            ],
            "sort_order": 8,
        },
        {
            "question": "Do you currently have representation?",
            "slug": "representation_status",
            "question_type": "select",
            "options": [
                {"value": "fully_represented", "label": "Fully Represented (Agent & Manager)"},
                {"value": "agent_only", "label": "Agent Only"},
                {"value": "manager_only", "label": "Manager Only"},
                {"value": "seeking", "label": "Seeking Representation"},
                {"value": "not_seeking", "label": "Not Currently Seeking"},
            ],
            "sort_order": 9,
        },
        {
            "question": "Current agent or representation (optional)",
            "slug": "current_agent",
            "question_type": "text",
            "sort_order": 10,
            "help_text": "Name of your current agent, manager, or representation company",
        },
    ],
}

MUSIC: Dict[str, Any] = {
    "category": {
        "name": "Music",
        "slug": "music",
        "description": "Music and audio performance questionnaire",
        "target_roles": ["talent"],
        "sort_order": 2,
    },
    "questions": [
        {
            "question": "What instruments do you play?",
            "slug": "instruments",
            "question_type": "multiselect",
            "options": [
                {"value": "piano", "label": "Piano"},
                {"value": "guitar", "label": "Guitar"},
                {"value": "bass", "label": "Bass"},
                {"value": "drums", "label": "Drums"},
                {"value": "violin", "label": "Violin"},
                {"value": "saxophone", "label": "Saxophone"},
                {"value": "trumpet", "label": "Trumpet"},
                {"value": "flute", "label": "Flute"},
                {"value": "other", "label": "Other"},
            ],
            "sort_order": 1,
        },
        {
            "question": "What is your vocal range?",
            "slug": "vocal_range",
            "question_type": "select",
            "options": [
                {"value": "soprano", "label": "Soprano"},
                {"value": "mezzo_soprano", "label": "Mezzo-Soprano"},
                {"value": "alto", "label": "Alto"},
                {"value": "tenor", "label": "Tenor"},
                {"value": "baritone", "label": "Baritone"},
                {"value": "bass", "label": "Bass"},
                {"value": "not_sure", "label": "Not Sure"},
            ],
            "sort_order": 2,
        },
        {
            "question": "What genres do you specialize in?",
            "slug": "music_genres",
            "question_type": "multiselect",
            "options": [
                {"value": "pop", "label": "Pop"},
                {"value": "rock", "label": "Rock"},
                {"value": "jazz", "label": "Jazz"},
                {"value": "classical", "label": "Classical"},
                {"value": "country", "label": "Country"},
                {"value": "hip_hop", "label": "Hip Hop"},
                {"value": "r_and_b", "label": "R&B"},
                {"value": "folk", "label": "Folk"},
                {"value": "electronic", "label": "Electronic"},
            ],
            "sort_order": 3,
        },
    ],
}

STARTER_SET: List[Dict[str, Any]] = [ACTING, MUSIC]
