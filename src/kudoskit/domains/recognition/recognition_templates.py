"""Read-only message tables for recognitions and digests.

Message templates use ``{effort}`` as the work-description placeholder.
"""

from types import MappingProxyType

from kudoskit.domains.recognition.models import EffortCategory, ImpactTier

EFFORT_PLACEHOLDER = "{effort}"
GENERIC_THANK_YOU = "Thank you for your contribution to the team!"
DEFAULT_DESCRIPTION = "your contribution"

RECOGNITION_TEMPLATES: MappingProxyType = MappingProxyType(
    {
        EffortCategory.BUG_FIX.value: (
            "Nice catch! Your fix for {effort} made the product more reliable for everyone.",
            "Thanks for tracking down and resolving {effort}. Users will feel the difference.",
            "Squashing {effort} took real persistence. Great debugging work!",
            "Your work on {effort} turned a headache into a non-issue. Thank you!",
        ),
        EffortCategory.FEATURE_WORK.value: (
            "Shipping {effort} is a big step forward for the product. Well done!",
            "Great job building {effort}. It opens up new possibilities for our users.",
            "Your work on {effort} brought a new idea to life. Fantastic delivery!",
            "Thanks to you, {effort} is live. That is real progress!",
            "Delivering {effort} shows great craftsmanship. Congratulations!",
        ),
        EffortCategory.CODE_REVIEW.value: (
            "Thanks for the careful review on {effort}. Your feedback keeps our code healthy.",
            "Your review of {effort} helped the whole team ship with confidence.",
            "Thoughtful comments on {effort} make everyone a better engineer. Thank you!",
            "Great eye on {effort}. Reviews like yours raise the bar for all of us.",
        ),
        EffortCategory.COLLABORATION.value: (
            "Thanks for teaming up on {effort}. Working together makes us stronger.",
            "Your help with {effort} made a real difference to the team.",
            "Great collaboration on {effort}! Your support did not go unnoticed.",
            "Jumping in on {effort} showed true team spirit. Thank you!",
        ),
        EffortCategory.MENTORING.value: (
            "Thank you for guiding the team through {effort}. Your mentorship shapes careers.",
            "Sharing your experience on {effort} is helping others grow. Much appreciated!",
            "Your patience and guidance on {effort} are a gift to the team.",
            "Mentoring through {effort} multiplies your impact. Thank you!",
        ),
        EffortCategory.LEARNING.value: (
            "Way to invest in yourself with {effort}! Growth like this lifts the whole team.",
            "Completing {effort} shows real commitment to learning. Keep it up!",
            "Your curiosity around {effort} keeps us all moving forward.",
            "Great progress on {effort}. New skills make for new possibilities!",
        ),
    }
)

IMPACT_PHRASES: MappingProxyType = MappingProxyType(
    {
        ImpactTier.TRANSFORMATIONAL.value: (
            "This is a game-changer for the whole organization!",
            "The impact of this work will be felt for a long time.",
            "Truly outstanding work with company-wide impact!",
        ),
        ImpactTier.SIGNIFICANT.value: (
            "This made a significant difference for the team.",
            "A major contribution to our goals!",
            "This moved the needle in a big way.",
        ),
    }
)

BADGE_GLYPHS: MappingProxyType = MappingProxyType(
    {
        EffortCategory.FEATURE_WORK.value: "🚀",
        EffortCategory.BUG_FIX.value: "🔧",
        EffortCategory.CODE_REVIEW.value: "👀",
        EffortCategory.COLLABORATION.value: "🤝",
        EffortCategory.LEARNING.value: "📚",
        EffortCategory.MENTORING.value: "👨‍🏫",
    }
)
DEFAULT_BADGE_GLYPH = "⭐"

DIGEST_OPENERS = (
    "Here is what the team accomplished this week.",
    "Another week, another round of great work. Here are the highlights.",
    "Let's take a moment to look back at this week's contributions.",
    "This week was full of effort worth celebrating.",
)

DIGEST_CLOSERS = (
    "Thank you all for the hard work. Keep it up!",
    "Every contribution counts. See you next week!",
    "Great work, everyone. Let's keep the momentum going!",
    "Proud of what we built together this week.",
)

DIGEST_CATEGORY_INTROS: MappingProxyType = MappingProxyType(
    {
        EffortCategory.BUG_FIX.value: (
            "Bugs were squashed:",
            "Reliability got a boost:",
            "Issues found and fixed:",
        ),
        EffortCategory.FEATURE_WORK.value: (
            "New features shipped:",
            "The product grew with:",
            "Feature work delivered:",
        ),
        EffortCategory.CODE_REVIEW.value: (
            "Code reviews kept quality high:",
            "Careful eyes on the code:",
            "Reviews completed:",
        ),
        EffortCategory.COLLABORATION.value: (
            "Teamwork in action:",
            "Collaboration highlights:",
            "Working together on:",
        ),
        EffortCategory.MENTORING.value: (
            "Knowledge was shared:",
            "Mentoring moments:",
            "Helping others grow:",
        ),
        EffortCategory.LEARNING.value: (
            "Learning and growth:",
            "New skills picked up:",
            "Time invested in learning:",
        ),
    }
)
UNCATEGORIZED_INTRO = "Notable contributions:"
RECOGNITION_HIGHLIGHTS_HEADING = "Recognition highlights:"
