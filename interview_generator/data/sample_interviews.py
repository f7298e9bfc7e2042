"""
Example interviews.

Exported by "Download Examples" before anything has been generated, and
loaded in place of a real job when DEVELOPMENT_MODE is on.
"""
from interview_generator.schemas.interview import Interview

SAMPLE_INTERVIEWS = [
    Interview(
        role="Software Engineer",
        industry="Technology, Information and Internet",
        question_one="Walk me through a typical workday. Which tasks take most of your time?",
        question_two="What slows you down most when shipping a change to production?",
        question_three="Which tools or workarounds do you rely on today to deal with that?",
        question_four="When those problems hit, how do they affect your deadlines and your team's goals?",
        question_five="If you could fix this with one tool, what would it do for you?",
    ),
    Interview(
        role="Product Manager",
        industry="Financial Services",
        question_one="How do you split your week between discovery, delivery and stakeholder work?",
        question_two="Where do you lose the most time gathering evidence for a roadmap decision?",
        question_three="How do you collect and organise customer feedback right now?",
        question_four="What happens to a launch when that feedback arrives late or incomplete?",
        question_five="Describe the ideal way you'd learn what customers need before committing a quarter.",
    ),
    Interview(
        role="Operations Manager",
        industry="Hospitals and Health Care",
        question_one="What does a normal shift look like for you from start to finish?",
        question_two="Which recurring problem do you dread dealing with every week?",
        question_three="What do you currently use to schedule staff and track supplies?",
        question_four="How do scheduling gaps affect patient care and your budget?",
        question_five="What would a perfect planning system let you stop worrying about?",
    ),
]
