"""Static catalog of policy topics and their Likert survey statements.

Each topic carries exactly three statements; survey answers are keyed
``"<topic>_<index>"`` against this list.
"""

QUESTIONS_PER_TOPIC = 3

TOPIC_TITLES: dict[str, str] = {
    "healthcare": "Healthcare",
    "education": "Education",
    "economy-jobs": "Economy & Jobs",
    "taxes": "Taxes",
    "climate-environment": "Climate & Environment",
    "immigration": "Immigration",
    "criminal-justice": "Criminal Justice",
    "foreign-policy": "Foreign Policy",
    "social-security": "Social Security",
    "housing": "Housing",
    "infrastructure": "Infrastructure",
    "civil-rights": "Civil Rights",
    "gun-policy": "Gun Policy",
    "technology-privacy": "Technology & Privacy",
}

QUESTION_BANK: dict[str, list[str]] = {
    "healthcare": [
        "Government should provide universal healthcare coverage for all citizens.",
        "Private healthcare insurance should be the primary way people get coverage.",
        "Healthcare costs should be regulated by the government to keep them affordable.",
    ],
    "education": [
        "Public schools should receive more funding from the government.",
        "School choice programs should be expanded to give parents more options.",
        "The government should spend more money to help people learn new job skills.",
    ],
    "economy-jobs": [
        "Cutting taxes for businesses is a good way to create more jobs.",
        "The government should regulate large corporations more strictly.",
        "The lowest hourly pay for workers should be raised.",
    ],
    "taxes": [
        "Wealthy individuals should pay higher tax rates than they currently do.",
        "Government spending should be reduced rather than raising taxes.",
        "Tax cuts stimulate economic growth better than government spending.",
    ],
    "climate-environment": [
        "The government should invest heavily in renewable energy sources.",
        "Environmental regulations should be reduced to help businesses grow.",
        "Climate change is one of the most urgent issues facing our country.",
    ],
    "immigration": [
        "Immigration levels should be increased to help fill job shortages.",
        "Border security should be the top priority in immigration policy.",
        "Undocumented immigrants should have a path to legal status.",
    ],
    "criminal-justice": [
        "Police departments should receive more funding and resources.",
        "Criminal justice reform should focus more on rehabilitation than punishment.",
        "Community programs are more effective than policing at preventing crime.",
    ],
    "foreign-policy": [
        "Military spending should be increased to maintain national security.",
        "The U.S. should reduce its military involvement in other countries.",
        "Defense spending should be redirected to domestic programs.",
    ],
    "social-security": [
        "Social Security benefits should be expanded for all retirees.",
        "The retirement age should be raised to ensure Social Security's future.",
        "Social Security should be privatized to give individuals more control.",
    ],
    "housing": [
        "The government should help make sure people can afford a place to live.",
        "Laws that limit how much landlords can raise rent are good for communities.",
        "We should build more homes and apartments, even if it makes neighborhoods more crowded.",
    ],
    "infrastructure": [
        "The government should invest more in roads, bridges, and public transportation.",
        "Private companies should take the lead role in infrastructure projects.",
        "Infrastructure spending should focus on green and sustainable projects.",
    ],
    "civil-rights": [
        "The government should do more to ensure equal rights for all groups.",
        "Anti-discrimination laws should be strengthened and better enforced.",
        "Individual liberty should take priority over government equality programs.",
    ],
    "gun-policy": [
        "Gun control laws should be stricter to reduce gun violence.",
        "The Second Amendment protects individual rights to own firearms.",
        "Background checks should be required for all gun purchases.",
    ],
    "technology-privacy": [
        "Large tech companies should be regulated more strictly by the government.",
        "Government should invest more in technology education and training.",
        "Privacy regulations should be strengthened for online platforms.",
    ],
}

LIKERT_LABELS: dict[int, str] = {
    1: "Strongly Disagree",
    2: "Disagree",
    3: "Neutral",
    4: "Agree",
    5: "Strongly Agree",
}


def response_key(topic_id: str, question_index: int) -> str:
    """Build the survey answer key for a topic question."""
    return f"{topic_id}_{question_index}"


def topic_title(topic_id: str) -> str:
    """Display title for a topic, falling back to the raw id."""
    return TOPIC_TITLES.get(topic_id, topic_id)
