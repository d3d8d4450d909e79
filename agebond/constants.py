"""Constants for family records, relationship labels and date display."""

# Relationship tags; exactly one person may hold "self"
RELATIONSHIP_TYPES = [
    "self",
    "parent",
    "child",
    "sibling",
    "spouse",
    "partner",
    "grandparent",
    "grandchild",
    "uncle",
    "aunt",
    "cousin",
    "nephew",
    "niece",
    "stepparent",
    "stepchild",
    "stepsibling",
    "in-law",
    "friend",
    "other",
]

SELF = "self"
DEFAULT_RELATIONSHIP = "other"

GENDER_OPTIONS = ["Male", "Female"]
DEFAULT_GENDER = "Male"

# Gendered forms of the gender-neutral relationship tags
GENDERED_RELATIONSHIPS = {
    "parent": {"Male": "father", "Female": "mother"},
    "child": {"Male": "son", "Female": "daughter"},
    "sibling": {"Male": "brother", "Female": "sister"},
    "grandparent": {"Male": "grandfather", "Female": "grandmother"},
    "grandchild": {"Male": "grandson", "Female": "granddaughter"},
    "stepparent": {"Male": "stepfather", "Female": "stepmother"},
    "stepchild": {"Male": "stepson", "Female": "stepdaughter"},
    "stepsibling": {"Male": "stepbrother", "Female": "stepsister"},
}

PRONOUNS = {
    "Male": {"subject": "he", "object": "him", "possessive": "his"},
    "Female": {"subject": "she", "object": "her", "possessive": "her"},
}

# Words people use for each relationship in free text
RELATIONSHIP_SYNONYMS = {
    "self": ["i", "me", "myself"],
    "parent": [
        "parent",
        "mom",
        "mama",
        "maman",
        "mum",
        "mummy",
        "mother",
        "dad",
        "papa",
        "daddy",
        "father",
    ],
    "child": ["child", "kid", "son", "boy", "daughter", "girl"],
    "sibling": ["sibling", "brother", "bro", "sister", "sis"],
    "spouse": ["spouse", "wife", "husband"],
    "partner": ["partner"],
    "grandparent": [
        "grandparent",
        "grandma",
        "grandmother",
        "granny",
        "nana",
        "grandpa",
        "grandfather",
        "granddad",
    ],
    "grandchild": ["grandchild", "grandson", "granddaughter"],
    "uncle": ["uncle"],
    "aunt": ["aunt", "auntie"],
    "cousin": ["cousin"],
    "nephew": ["nephew"],
    "niece": ["niece"],
}

# Locale-neutral month names for display dates
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
