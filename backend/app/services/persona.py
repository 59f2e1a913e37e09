"""IVOR persona: prompt template, reply post-processing and local knowledge fallback.

Inspired by Ivor Cummings (1916-1991), community leader. Everything here is pure;
the knowledge tables are built once at import and never mutated.
"""

import random
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class KnowledgeEntry:
    topic: str
    message: str
    context: str
    resources: tuple[str, ...] = ()


# First matching topic wins, so order matters.
COMMUNITY_KNOWLEDGE: tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        topic="mental health",
        message=(
            "I understand how important mental health is, especially as a QTIPOC person in the UK. "
            "You might find support through the NHS IAPT services, or community-specific support like "
            "Black Thrive BQC in South London. Many of us find strength in community connection too."
        ),
        context="mental_health_support",
        resources=("NHS IAPT", "Black Thrive BQC", "Mind", "LGBT Foundation"),
    ),
    KnowledgeEntry(
        topic="housing",
        message=(
            "Housing struggles are unfortunately common in our community. If you're facing homelessness "
            "or housing insecurity, The Outside Project offers LGBTQ+ specific housing support. Shelter and "
            "your local council's housing team can also help with your rights and options."
        ),
        context="housing_support",
        resources=("Outside Project", "Shelter", "Local Council Housing", "Crisis"),
    ),
    KnowledgeEntry(
        topic="benefits",
        message=(
            "Navigating the benefits system can be overwhelming. Citizens Advice offers free, confidential "
            "support with benefit claims and appeals. If you're LGBTQ+ and facing discrimination, the LGBT "
            "Foundation also has welfare rights advice."
        ),
        context="financial_support",
        resources=("Citizens Advice", "LGBT Foundation", "Turn2us", "StepChange"),
    ),
    KnowledgeEntry(
        topic="coming out",
        message=(
            "Coming out is a deeply personal journey, and there's no 'right' way or timeline. The LGBT "
            "Foundation has great resources, and locally, organizations like Gendered Intelligence (for trans "
            "experiences) offer community support. You know yourself best."
        ),
        context="identity_support",
        resources=("LGBT Foundation", "Gendered Intelligence", "Stonewall", "Local LGBT+ groups"),
    ),
    KnowledgeEntry(
        topic="discrimination",
        message=(
            "I'm sorry you're experiencing discrimination. You have rights under the Equality Act 2010. ACAS "
            "offers free employment advice, and the Equality and Human Rights Commission can guide you on legal "
            "options. Remember, you deserve to be treated with dignity."
        ),
        context="legal_rights",
        resources=("ACAS", "EHRC", "LGBT Foundation", "Citizens Advice"),
    ),
    KnowledgeEntry(
        topic="healthcare",
        message=(
            "Accessing affirming healthcare can be challenging. If you're trans, the NHS Gender Identity Clinics "
            "have long waits, but CliniQ offers community-specific sexual health services. For general healthcare "
            "concerns, don't be afraid to advocate for yourself with your GP."
        ),
        context="healthcare_access",
        resources=("CliniQ", "NHS", "Terrence Higgins Trust", "Local sexual health clinics"),
    ),
)

GENERIC_FALLBACKS: tuple[str, ...] = (
    "I'm here with you, even when technology isn't working perfectly. The BLKOUT community is built on "
    "resilience and mutual support. What you're feeling and experiencing matters.",
    "Technology might be giving me some challenges right now, but our community connection is stronger than "
    "any technical difficulty. I'm still here to listen and support you.",
    "I want to support you properly, but I'm having some technical difficulties at the moment. What I can tell "
    "you is that you're part of a powerful QTIPOC community that cares about you.",
    "While I work through some technical issues, please know that your voice and experiences are valued in our "
    "community. Is there something specific I can help you with when I'm back to full capacity?",
    "I'm experiencing some connectivity issues, but I don't want to leave you without support. The BLKOUT "
    "community has many resources and people who care. Your wellbeing matters to all of us.",
)

SUPPORT_KEYWORDS = (
    "help", "struggling", "difficult", "hard", "lonely", "sad",
    "depressed", "anxious", "worried", "scared", "alone",
)

RESOURCE_KEYWORDS = (
    "housing", "benefits", "nhs", "mental health", "support",
    "help", "services", "legal", "rights", "discrimination",
)

# (trigger keywords, resources); declaration order is the output order
RESOURCE_MAP: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("mental health", "therapy"), ("NHS IAPT", "Black Thrive BQC")),
    (("housing", "homeless"), ("Outside Project", "Shelter")),
    (("benefits", "money"), ("Citizens Advice", "Turn2us")),
    (("work", "job"), ("ACAS", "LGBT Foundation")),
    (("trans", "gender"), ("Gendered Intelligence", "CliniQ")),
)

KNOWN_RESOURCES = (
    "BLKOUT UK: Black LGBTQ+ community organization",
    "Black Thrive BQC: Queer and trans support in Brixton",
    "UK Black Pride: Annual celebration and year-round community",
    "Gendered Intelligence: Trans community support",
    "Outside Project: LGBTQ+ homelessness support",
    "LGBT Foundation: National support services",
)

EMPATHETIC_OPENER = "I understand what you're going through. "
SOLIDARITY_SENTENCE = "Remember, you're part of a strong community. We're here for each other."
RESOURCES_PREFIX = "Some UK resources that might help: "

PROMPT_TEMPLATE = """
You are IVOR, a community AI assistant for BLKOUT, inspired by Ivor Cummings (1916-1991).
You embody warmth, wisdom, and deep community knowledge.

YOUR IDENTITY:
- You are knowledgeable about QTIPOC (Queer, Trans, Intersex People of Colour) experiences
- You understand UK systems: NHS, benefits, housing, legal rights
- You speak with warmth and authenticity, never patronizing
- You connect people to community resources and mutual aid
- You honor intersectionality: race, sexuality, gender, class, disability

YOUR COMMUNICATION STYLE:
- Use "I" statements naturally
- Be conversational and warm, like talking to a friend
- Share knowledge without lecturing
- Acknowledge struggles while highlighting resilience
- Connect individual issues to community strength

UK COMMUNITY RESOURCES YOU KNOW:
{resources}

RESPOND TO: "{message}"

Remember: You're here to support, connect, and empower the QTIPOC community with authentic care."""

_FIRST_PERSON = re.compile(r"\bI\b")


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


class PersonaEngine:
    """Turns user messages into persona prompts and AI replies into IVOR replies."""

    def __init__(
        self,
        knowledge: tuple[KnowledgeEntry, ...] = COMMUNITY_KNOWLEDGE,
        resource_map: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = RESOURCE_MAP,
        rng: random.Random | None = None,
    ):
        self.knowledge = knowledge
        self.resource_map = resource_map
        self.rng = rng or random.Random()

    def enhance(self, user_message: str) -> str:
        """Wrap the raw user message in the persona instruction template."""
        resources = "\n".join(f"- {r}" for r in KNOWN_RESOURCES)
        return PROMPT_TEMPLATE.format(resources=resources, message=user_message)

    def post_process(self, ai_reply: str, original_message: str) -> str:
        """Give a provider reply IVOR's voice, then add community context."""
        reply = ai_reply
        if not _FIRST_PERSON.search(reply):
            reply = EMPATHETIC_OPENER + reply
        return self.enrich(reply, original_message)

    def enrich(self, reply: str, original_message: str) -> str:
        """Append the solidarity sentence and relevant UK resources, when the message calls for them."""
        if self.is_seeking_support(original_message) and SOLIDARITY_SENTENCE not in reply:
            reply += "\n\n" + SOLIDARITY_SENTENCE

        if self.needs_resources(original_message):
            resources = self.relevant_resources(original_message)
            if resources:
                reply += "\n\n" + RESOURCES_PREFIX + ", ".join(resources)

        return reply

    def fallback(self, user_message: str) -> str:
        """Local answer used when the provider is unavailable. Never raises."""
        entry = self.match_topic(user_message)
        if entry:
            return entry.message
        return self.rng.choice(GENERIC_FALLBACKS)

    def match_topic(self, user_message: str) -> KnowledgeEntry | None:
        lowered = user_message.lower()
        for entry in self.knowledge:
            if entry.topic in lowered:
                return entry
        return None

    def is_seeking_support(self, message: str) -> bool:
        return _contains_any(message, SUPPORT_KEYWORDS)

    def needs_resources(self, message: str) -> bool:
        return _contains_any(message, RESOURCE_KEYWORDS)

    def relevant_resources(self, message: str) -> list[str]:
        found: dict[str, None] = {}
        for keywords, resources in self.resource_map:
            if _contains_any(message, keywords):
                found.update(dict.fromkeys(resources))
        return list(found)


persona = PersonaEngine()
